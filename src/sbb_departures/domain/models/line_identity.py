"""Line identity lookup used to enrich XML departures."""

from typing import NamedTuple


class LineIdentity(NamedTuple):
    """Category and line number as shown to riders, e.g. ``("S", "14")``."""

    category: str
    number: str


# Minutes since the epoch of a departure -> line identity
CategoryMap = dict[int, LineIdentity]

DEFAULT_CATEGORY = "TRAIN"
