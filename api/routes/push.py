from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_push_service
from core.database import get_db
from schemas.push import PushMessage, PushRegister, PushSendOne, PushTokenRead
from services import push_service
from services.push_service import PushService

router = APIRouter()


@router.post("/register")
async def register_push_token(body: PushRegister, db: AsyncSession = Depends(get_db)):
    saved = await push_service.register_token(db, body.token, body.platform)
    return {"ok": True, "pushToken": PushTokenRead.model_validate(saved)}


@router.post("/send-test")
async def send_test_push(
    body: PushMessage,
    db: AsyncSession = Depends(get_db),
    push: PushService = Depends(get_push_service),
):
    result = await push_service.send_test(db, push, body.title, body.body)
    return {
        "ok": True,
        "attempted": result.attempted,
        "sent": result.sent,
        "failed": result.failed,
        "failures": [
            {"token": f.token, "code": f.code, "error": f.error}
            for f in result.failures
        ],
    }


@router.post("/send-one")
async def send_one_push(body: PushSendOne, push: PushService = Depends(get_push_service)):
    message_id = await push_service.send_one(push, body.token, body.title, body.body)
    return {"ok": True, "messageId": message_id}
