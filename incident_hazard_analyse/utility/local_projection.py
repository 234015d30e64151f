import threading
from functools import lru_cache
from typing import Sequence

from pyproj import Transformer
from pyproj.enums import TransformDirection

from incident_hazard_analyse.utility.great_circle import EARTH_RADIUS_M


@lru_cache(maxsize=1024)
def _eqc_transformer(origin_lat: float, origin_lng: float, thread_id: int) -> Transformer:
    """One lng/lat (degrees) -> local meters pipeline per origin and thread.

    Transformers are not safe to share between threads, hence the thread id in the key.
    """
    return Transformer.from_pipeline(
        "+proj=pipeline +step +proj=unitconvert +xy_in=deg +xy_out=rad "
        f"+step +proj=eqc +lat_ts={origin_lat} +lat_0={origin_lat} +lon_0={origin_lng} "
        f"+x_0=0 +y_0=0 +R={EARTH_RADIUS_M}"
    )


class LocalProjection:
    """Equirectangular plane centered on the mean of a set of coordinates.

    Explanation:
    x = R * dLng * cos(lat0), y = R * dLat (radians), which is the spherical
    `eqc` projection with lat_ts = lat_0 = lat0 and lon_0 = lng0. Only accurate
    close to the origin, so it is meant for one cluster's neighborhood.
    The pipeline is cached, so re-scoring the same clusters reuses it.
    """

    origin_lat: float
    origin_lng: float
    transformer: Transformer

    def __init__(self, coordinates: Sequence[tuple[float, float]]) -> None:
        """Build the projection around the arithmetic mean of the coordinates.

        Args:
            coordinates: Non-empty sequence of (lat, lng) tuples.
        """
        if not coordinates:
            raise ValueError("Local projection needs at least one coordinate.")
        self.origin_lat = sum(lat for lat, _ in coordinates) / len(coordinates)
        self.origin_lng = sum(lng for _, lng in coordinates) / len(coordinates)
        self.transformer = _eqc_transformer(self.origin_lat, self.origin_lng, threading.get_ident())

    def to_local(self, lat: float, lng: float) -> tuple[float, float]:
        """Project (lat, lng) to local (x, y) meters."""
        x, y = self.transformer.transform(lng, lat)
        return x, y

    def to_geographic(self, x: float, y: float) -> tuple[float, float]:
        """Inverse of to_local, returns (lat, lng)."""
        lng, lat = self.transformer.transform(x, y, direction=TransformDirection.INVERSE)
        return lat, lng

    def centroid(self, coordinates: Sequence[tuple[float, float]]) -> tuple[float, float]:
        """Average coordinates in the local plane and project the mean back.

        Args:
            coordinates: Non-empty sequence of (lat, lng) tuples.

        Returns:
            Centroid as (lat, lng).
        """
        if not coordinates:
            raise ValueError("Cannot compute the centroid of no coordinates.")
        local = [self.to_local(lat, lng) for lat, lng in coordinates]
        cx = sum(x for x, _ in local) / len(local)
        cy = sum(y for _, y in local) / len(local)
        return self.to_geographic(cx, cy)
