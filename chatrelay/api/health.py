from fastapi import APIRouter

from chatrelay.schemas.chat import HealthOut

router = APIRouter()


@router.get('/health', response_model=HealthOut)
def health() -> HealthOut:
    return HealthOut(status='ok', message='Server is running')
