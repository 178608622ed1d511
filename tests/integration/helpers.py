from uuid import UUID

from src.api.utils.jwt import generate_jwt


def auth_headers(user_id: UUID, tenant_id: UUID) -> dict:
    return {"Authorization": f"Bearer {generate_jwt(user_id, tenant_id)}"}
