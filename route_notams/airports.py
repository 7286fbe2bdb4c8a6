"""Airport code lookup used to turn departure/destination codes into positions."""

import re
from abc import ABC, abstractmethod
from typing import Dict, Mapping, Optional, Tuple, Union

from route_notams.exceptions import ValidationError
from route_notams.models.coordinate import Coordinate

ICAO_CODE_PATTERN = re.compile(r'^[A-Z][A-Z0-9]{3}$')


def normalize_icao(code: Optional[str]) -> str:
    """
    Upper-case and validate an ICAO airport code.

    Raises:
        ValidationError: If the code is not four letters/digits starting with a letter
    """
    if not isinstance(code, str):
        raise ValidationError(f"Airport code must be a string, got {code!r}")
    normalized = code.strip().upper()
    if not ICAO_CODE_PATTERN.match(normalized):
        raise ValidationError(f"Invalid ICAO airport code: {code!r}")
    return normalized


class AirportDirectory(ABC):
    """
    Resolves airport codes to positions.

    Implementations can be backed by a database, a CSV file or a web
    service; the pipeline only needs lookup.
    """

    @abstractmethod
    def lookup(self, code: str) -> Optional[Coordinate]:
        """
        Find an airport position.

        Args:
            code: Normalized ICAO code

        Returns:
            Airport position, or None if the code is unknown
        """
        pass


class StaticAirportDirectory(AirportDirectory):
    """
    In-memory directory built from a mapping of code to position.

    Example:
        directory = StaticAirportDirectory({
            "KOKC": (35.3931, -97.6007),
            "KDFW": Coordinate(32.8998, -97.0403),
        })
    """

    def __init__(self, airports: Mapping[str, Union[Coordinate, Tuple[float, float]]]):
        self._airports: Dict[str, Coordinate] = {}
        for code, position in airports.items():
            if not isinstance(position, Coordinate):
                position = Coordinate(*position)
            self._airports[normalize_icao(code)] = position

    def lookup(self, code: str) -> Optional[Coordinate]:
        return self._airports.get(code.strip().upper())

    def __len__(self) -> int:
        return len(self._airports)

    def __contains__(self, code: str) -> bool:
        return self.lookup(code) is not None
