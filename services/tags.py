'''
Tag resolution for uploaded trip images.

A recognised landmark always wins the first slot, the classifier's generic
labels fill whatever is left in their ranked order. Pure function, no I/O,
so the same classifier output always gives the same tags.
'''

from typing import NamedTuple, Optional, Sequence

# Number of tag columns on the images table
TAG_SLOTS = 5


class TagSet(NamedTuple):
    tag1: Optional[str] = None
    tag2: Optional[str] = None
    tag3: Optional[str] = None
    tag4: Optional[str] = None
    tag5: Optional[str] = None

    def as_columns(self) -> dict:
        # Column name -> value, ready to pass to ImageModel(**...)
        return self._asdict()


def resolve_tags(landmarks: Sequence[str], labels: Sequence[str]) -> TagSet:
    if landmarks:
        tags = [landmarks[0], *labels[:TAG_SLOTS - 1]]
    else:
        tags = list(labels[:TAG_SLOTS])

    return TagSet(*tags)
