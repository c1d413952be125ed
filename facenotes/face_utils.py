# facenotes/face_utils.py
import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .config import DESCRIPTOR_DIM, FACE_MATCH_THRESHOLD
from .errors import DuplicateIdentityError, ValidationError
from .models.identity_model import EnrolledIdentity

logger = logging.getLogger(__name__)


@dataclass
class MatchResult:
    identity: Optional[EnrolledIdentity]
    distance: float
    accepted: bool

    @property
    def confidence(self) -> float:
        """1 - distance. Only meaningful for distances in [0, 1]; not a probability."""
        return round(1.0 - self.distance, 4)


def euclidean_distance(a: Optional[Sequence[float]], b: Optional[Sequence[float]]) -> float:
    """
    Euclidean distance between two descriptors.
    Vectors of different length (or missing ones) can never match, so the
    distance is +inf instead of an error.
    """
    if a is None or b is None:
        return math.inf
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.ndim != 1 or va.shape != vb.shape:
        return math.inf
    return float(np.linalg.norm(va - vb))


def find_nearest(
    query: Sequence[float], identities: Iterable[EnrolledIdentity]
) -> Tuple[Optional[EnrolledIdentity], float]:
    """
    Linear scan for the enrolled identity closest to ``query``.
    Ties keep the first identity seen. Returns (None, inf) for an empty set.
    """
    best: Optional[EnrolledIdentity] = None
    best_distance = math.inf
    for identity in identities:
        distance = euclidean_distance(query, identity.descriptor)
        logger.debug(f"Distance to {identity.name}: {distance:.4f}")
        if distance < best_distance:
            best_distance = distance
            best = identity
    return best, best_distance


def is_accepted(distance: float, threshold: float = FACE_MATCH_THRESHOLD) -> bool:
    return distance < threshold


def match_descriptor(
    query: Sequence[float],
    identities: Iterable[EnrolledIdentity],
    threshold: float = FACE_MATCH_THRESHOLD,
) -> MatchResult:
    """
    Find the nearest enrolled identity and decide whether it is close
    enough to count as the same person.
    """
    identity, distance = find_nearest(query, identities)
    accepted = identity is not None and is_accepted(distance, threshold)
    if identity is not None:
        logger.info(
            f"Best match: {identity.name} distance={distance:.4f} thr={threshold} -> {accepted}"
        )
    return MatchResult(identity=identity, distance=distance, accepted=accepted)


def _is_number(value) -> bool:
    # bool is an int subclass but never a valid descriptor component
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:
        # JSON integers can exceed the float range
        return False


def validate_query_descriptor(descriptor) -> List[float]:
    """
    Check a login descriptor. Only presence and numeric content are enforced;
    a wrong length simply never matches anyone.
    """
    if descriptor is None:
        raise ValidationError("Face descriptor is required")
    if not isinstance(descriptor, (list, tuple)) or len(descriptor) == 0:
        raise ValidationError("Invalid face descriptor format")
    if not all(_is_number(v) for v in descriptor):
        raise ValidationError("Invalid face descriptor format")
    return [float(v) for v in descriptor]


def validate_registration(
    name: Optional[str],
    descriptor,
    existing_names: Iterable[str],
    dim: int = DESCRIPTOR_DIM,
) -> Tuple[str, List[float]]:
    """
    Validate a new enrolment and return the cleaned (name, descriptor).

    Raises ValidationError for missing fields or a malformed descriptor and
    DuplicateIdentityError when the name is taken, ignoring case.
    """
    if not name or not isinstance(name, str) or not name.strip() or descriptor is None:
        raise ValidationError("Name and face descriptor are required")
    name = name.strip()

    clean = validate_query_descriptor(descriptor)
    if len(clean) != dim:
        raise ValidationError(
            f"Invalid face descriptor format: expected {dim} values, got {len(clean)}"
        )

    folded = name.lower()
    if any(existing.lower() == folded for existing in existing_names):
        raise DuplicateIdentityError("User with this name already exists")

    return name, clean
