#Purpose: Candidate fetching (hard rule gates before ranking).
#Builds the base candidate set from the volunteers collection.
#Rules applied by the store query:
#isAvailable == true
#isOnline == true
#Records that cannot be decoded are skipped (logged), not fatal.

#Output: "rule-qualified volunteers" in store order (still not ranked).

import logging
from typing import List

from rides.models import RecordDecodeError
from store.document_store import DocumentStore
from volunteers.models import VOLUNTEERS_COLLECTION, Volunteer

logger = logging.getLogger(__name__)

CANDIDATE_FILTERS = {"isAvailable": True, "isOnline": True}


def fetch_candidate_volunteers(store: DocumentStore) -> List[Volunteer]:
    """
    Volunteers flagged both available and online. Raises StoreError when the
    query itself fails.
    """
    documents = store.query(VOLUNTEERS_COLLECTION, CANDIDATE_FILTERS)

    volunteers = []
    for document in documents:
        try:
            volunteers.append(Volunteer.from_document(document.id, document.data))
        except RecordDecodeError as exc:
            logger.warning("Skipping volunteer record: %s", exc)

    return volunteers
