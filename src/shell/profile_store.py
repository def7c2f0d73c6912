"""Profile Store - Imperative Shell.

This module handles persistence of the user profile record (filter
selection, saved location, contact details). The record is a single
document keyed by a fixed identifier.

All I/O is contained here; merge and change-detection logic is in the
core module.
"""

import copy
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Protocol

from google.cloud import firestore


logger = logging.getLogger(__name__)


# Default collection name for storing profiles
DEFAULT_COLLECTION = "relief_profiles"

# Default document holding the profile record
DEFAULT_DOCUMENT = "user_profile"


class ProfileStore(Protocol):
    """Read/write access to the persisted profile record."""

    def load(self) -> dict[str, Any] | None:
        """Return the stored record, or None if nothing is stored."""
        ...

    def save(self, record: dict[str, Any]) -> bool:
        """Replace the stored record. Returns True on success."""
        ...


class InMemoryProfileStore:
    """Profile store kept in process memory.

    Used for local runs and tests. Records are copied on the way in and
    out so callers cannot mutate the stored record.
    """

    def __init__(self, record: dict[str, Any] | None = None) -> None:
        self._record = copy.deepcopy(record) if record else None
        self.save_count = 0

    def load(self) -> dict[str, Any] | None:
        return copy.deepcopy(self._record)

    def save(self, record: dict[str, Any]) -> bool:
        self._record = copy.deepcopy(record)
        self.save_count += 1
        return True


@dataclass
class FirestoreProfileConfig:
    """Configuration for the Firestore profile store.

    Attributes:
        project_id: GCP project ID (None for default)
        database: Firestore database name (None for default database)
        collection: Firestore collection name
        document: Document ID of the profile record
    """
    project_id: str | None = None
    database: str | None = None
    collection: str = DEFAULT_COLLECTION
    document: str = DEFAULT_DOCUMENT


class FirestoreProfileStore:
    """Profile store backed by a Firestore document.

    This is part of the imperative shell - it handles database I/O.

    Document structure:
    {
        "profile": {...profile fields...},
        "updated_at": <timestamp>
    }
    """

    def __init__(self, config: FirestoreProfileConfig | None = None) -> None:
        """Initialize Firestore profile store.

        Args:
            config: Firestore configuration
        """
        self.config = config or FirestoreProfileConfig()
        self._client: firestore.Client | None = None

    @property
    def client(self) -> firestore.Client:
        """Lazy initialization of Firestore client."""
        if self._client is None:
            kwargs = {}
            if self.config.project_id:
                kwargs['project'] = self.config.project_id
            if self.config.database:
                kwargs['database'] = self.config.database
            self._client = firestore.Client(**kwargs)
        return self._client

    def _get_doc_ref(self) -> Any:
        """Get reference to the profile document."""
        return (
            self.client
            .collection(self.config.collection)
            .document(self.config.document)
        )

    def load(self) -> dict[str, Any] | None:
        """Fetch the stored profile record.

        This method performs database I/O.

        Returns:
            Profile record, or None if missing or on error
        """
        logger.info("Fetching profile from Firestore")

        try:
            doc = self._get_doc_ref().get()

            if not doc.exists:
                logger.info("No existing profile document found")
                return None

            data = doc.to_dict() or {}
            return data.get("profile")

        except Exception as e:
            logger.error("Failed to fetch profile: %s", str(e))
            # Start without a saved selection rather than crash
            return None

    def save(self, record: dict[str, Any]) -> bool:
        """Replace the stored profile record.

        This method performs database I/O.

        Args:
            record: Profile record to store

        Returns:
            True if save was successful
        """
        logger.info("Saving profile to Firestore")

        try:
            self._get_doc_ref().set({
                "profile": record,
                "updated_at": datetime.now(timezone.utc),
            })

            logger.info("Successfully saved profile")
            return True

        except Exception as e:
            logger.error("Failed to save profile: %s", str(e))
            return False
