from fastapi import APIRouter, Request, status
from utils.deps import db_dependency
from schemas.contact_schemas import ContactMessageRequest
from services.contact_service import ContactService
from middleware.rate_limiter import limiter


router = APIRouter(
    prefix="/contact",
    tags=["contact"]
)


@router.post("", status_code=status.HTTP_201_CREATED)
@limiter.limit("5/minute")
async def send_message(request: Request, body: ContactMessageRequest, db: db_dependency):
    ContactService.save_message(body, db)

    return {"message": "Thank you for your message! We will get back to you shortly."}
