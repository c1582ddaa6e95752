"""Repository for applicant identity records."""

import logging
from typing import Optional

from jobboard.constants import CANDIDATE_PROFILES_COLLECTION
from jobboard.database.document_store import DocumentSnapshot, DocumentStore
from jobboard.models import CandidateProfile
from jobboard.repositories.base_repository import BaseRepository

logger = logging.getLogger(__name__)


def document_to_profile(document: DocumentSnapshot) -> CandidateProfile:
    data = document.data or {}
    return CandidateProfile(
        id=document.id,
        user_id=data.get("userId") or "",
        name=data.get("name") or "",
        email=data.get("email") or "",
        phone=data.get("phone") or "",
        created_at=data.get("createdAt"),
        updated_at=data.get("updatedAt"),
    )


class CandidateProfileRepository(BaseRepository):
    """Identity records of authenticated applicants, one per user id.

    Attributes:
        document_store: Remote document store client.
        collection_name: Set to "candidates" for this repository.
    """

    def __init__(self, document_store: DocumentStore):
        super().__init__(document_store, CANDIDATE_PROFILES_COLLECTION)

    def get_by_user_id(self, user_id: str) -> Optional[CandidateProfile]:
        """Return the identity record of a user, None if there is none yet."""
        documents = self.find_by(userId=user_id)
        if not documents:
            return None

        if len(documents) > 1:
            logger.warning(f"User {user_id} has {len(documents)} identity records, using the first")

        return document_to_profile(documents[0])

    def resolve(self, user_id: str, name: str, email: str, phone: str) -> CandidateProfile:
        """Find or create a user's identity record and refresh its contact details.

        A missing record is created; an existing one is updated only when
        name, email or phone changed.

        Returns:
            The identity record as it is now stored.
        """
        profile = self.get_by_user_id(user_id)

        if profile is None:
            profile_id = self.create({
                "userId": user_id,
                "name": name,
                "email": email,
                "phone": phone,
            })
            logger.info(f"Created identity record {profile_id} for user {user_id}")
            return CandidateProfile(id=profile_id, user_id=user_id, name=name, email=email, phone=phone)

        if (profile.name, profile.email, profile.phone) != (name, email, phone):
            self.update(profile.id, {"name": name, "email": email, "phone": phone})
            profile = profile.model_copy(update={"name": name, "email": email, "phone": phone})

        return profile
