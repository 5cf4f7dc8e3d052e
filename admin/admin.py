from sqladmin import Admin, ModelView
from sqlalchemy.ext.asyncio import AsyncEngine

from admin.auth import AdminAuth
from core.config import Settings
from models import Alert, Device, PushToken, Resident, Subscription, User


class UserAdmin(ModelView, model=User):
    column_list = [User.id, User.email, User.is_disabled, User.created_at]
    column_searchable_list = [User.email]
    form_excluded_columns = [User.password_hash, User.devices, User.subscription]


class SubscriptionAdmin(ModelView, model=Subscription):
    column_list = "__all__"


class DeviceAdmin(ModelView, model=Device):
    column_list = [
        Device.id, Device.device_id, Device.name, Device.room,
        Device.user_id, Device.is_active, Device.last_seen_at,
    ]
    column_searchable_list = [Device.device_id, Device.name]


class ResidentAdmin(ModelView, model=Resident):
    column_list = [Resident.id, Resident.name, Resident.room, Resident.device_id, Resident.created_at]
    column_searchable_list = [Resident.name]


class AlertAdmin(ModelView, model=Alert):
    column_list = [
        Alert.id, Alert.type, Alert.status, Alert.elderly, Alert.room,
        Alert.confidence, Alert.source, Alert.created_at,
    ]
    column_default_sort = [(Alert.created_at, True)]


class PushTokenAdmin(ModelView, model=PushToken):
    column_list = [PushToken.id, PushToken.platform, PushToken.token, PushToken.updated_at]


def setup_admin(app, engine: AsyncEngine, settings: Settings) -> Admin:
    admin = Admin(
        app,
        engine,
        authentication_backend=AdminAuth(settings),
    )

    admin.add_view(UserAdmin)
    admin.add_view(SubscriptionAdmin)
    admin.add_view(DeviceAdmin)
    admin.add_view(ResidentAdmin)
    admin.add_view(AlertAdmin)
    admin.add_view(PushTokenAdmin)
    return admin
