"""
Playlist Models

Data models for playlist requests submitted to the playlist manager.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

Number = Union[int, float]


def _presentation_id(data: dict) -> str:
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping with an id, got {data!r}")
    if 'id' in data:
        return str(data['id'])
    return str(data['presentation_id'])


def _entries(data: dict, *keys) -> list:
    """First list found under keys; None or missing means empty."""
    for key in keys:
        if data.get(key) is not None:
            value = data[key]
            if not isinstance(value, list):
                raise ValueError(f"'{key}' must be a list, got {value!r}")
            for entry in value:
                if not isinstance(entry, dict):
                    raise ValueError(f"'{key}' entries must be mappings, got {entry!r}")
            return value
    return []


@dataclass
class Cancellation:
    """Another presentation to cancel at this request's start time."""
    presentation_id: str

    @classmethod
    def from_dict(cls, data: dict) -> 'Cancellation':
        return cls(presentation_id=_presentation_id(data))


@dataclass
class FollowOn:
    """
    A presentation pre-staged near the end of the current one.

    Attributes:
        presentation_id: Id the follow-on is loaded and run under
        flavor: Flavor to load
        duration: Duration in seconds
    """
    presentation_id: str
    flavor: str
    duration: Number

    @classmethod
    def from_dict(cls, data: dict) -> 'FollowOn':
        return cls(
            presentation_id=_presentation_id(data),
            flavor=data['flavor'],
            duration=data['duration'],
        )


@dataclass
class PlaylistRequest:
    """
    A playlist to load, schedule and chain on the device.

    Attributes:
        flavor: Flavor/theme name on the device (without .xml)
        duration: Playlist duration in seconds; every timer offset derives
                  from it
        presentation_id: Id the device uses for load/run/cancel
        logo: Optional logo tag (e.g. 'domesticAds/TAG3631'); 0 and "0"
              mean no logo
        delay: Optional start delay in seconds. None runs immediately;
               0 is a real delay and takes the delayed path.
        cancellations: Presentations to cancel at the start time
        follow_ons: Presentations to load and run as this one ends
    """
    flavor: str
    duration: Number
    presentation_id: str
    logo: Optional[Union[str, int]] = None
    delay: Optional[Number] = None
    cancellations: List[Cancellation] = field(default_factory=list)
    follow_ons: List[FollowOn] = field(default_factory=list)

    @property
    def has_delay(self) -> bool:
        return self.delay is not None

    @classmethod
    def from_dict(cls, data: dict) -> 'PlaylistRequest':
        """
        Build a request from a dict.

        Accepts both the field names above and the short device-style
        keys: id, tag, cancel (list of {"id"}), start (list of
        {"id", "flavor", "duration"}).
        """
        if not isinstance(data, dict):
            raise ValueError(f"Playlist request must be a mapping, got {data!r}")
        cancels = _entries(data, 'cancel', 'cancellations')
        starts = _entries(data, 'start', 'follow_ons')
        return cls(
            flavor=data['flavor'],
            duration=data['duration'],
            presentation_id=_presentation_id(data),
            logo=data.get('tag', data.get('logo')),
            delay=data.get('delay'),
            cancellations=[Cancellation.from_dict(c) for c in cancels],
            follow_ons=[FollowOn.from_dict(s) for s in starts],
        )

    def to_dict(self) -> dict:
        return {
            'flavor': self.flavor,
            'duration': self.duration,
            'id': self.presentation_id,
            'tag': self.logo,
            'delay': self.delay,
            'cancel': [{'id': c.presentation_id} for c in self.cancellations],
            'start': [
                {'id': f.presentation_id, 'flavor': f.flavor, 'duration': f.duration}
                for f in self.follow_ons
            ],
        }
