from fastapi import APIRouter, Depends
from pymongo import DESCENDING

from backend.database import Store, get_store, store_errors
from backend.models.document import insert_result, serialize_documents, utc_now_iso, without_id
from backend.models.review import CreateReviewRequest

router = APIRouter(tags=['reviews'])


@router.get('/reviews/{session_id}')
def list_session_reviews(session_id: str, store: Store = Depends(get_store)):
    with store_errors('fetch reviews'):
        reviews = store.reviews.find({'sessionId': session_id}).sort('reviewDate', DESCENDING)
        return serialize_documents(reviews)


@router.post('/reviews')
def create_review(data: CreateReviewRequest, store: Store = Depends(get_store)):
    document = without_id(data.model_dump(exclude_none=True))
    if not document.get('reviewDate'):
        document['reviewDate'] = utc_now_iso()

    with store_errors('create review'):
        result = store.reviews.insert_one(document)

    return insert_result(result)
