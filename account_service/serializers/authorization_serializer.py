from typing import Any, Mapping, Union

from account_service.schemas.auth_schema import AuthorizationOut, ClaimsOut, LoginResponse

Authorization = Union[LoginResponse, Mapping[str, Any]]


def _serialize_authorization(auth: Authorization) -> dict:
    if isinstance(auth, LoginResponse):
        session_id, claims = auth.session_id, auth.claims
    else:
        # flat record: the token sits next to the claim fields
        session_id, claims = auth.get("token"), auth
    out = AuthorizationOut(session_id=session_id, claims=ClaimsOut.model_validate(dict(claims)))
    return out.model_dump(by_alias=True)


def serialize(data: Union[Authorization, list[Authorization], None]) -> Union[dict, list[dict]]:
    """Shape one login result, or a list of them, as ``{sessionId, claims}``."""
    if data is None:
        raise ValueError("Expect data to be not None")
    if isinstance(data, (list, tuple)):
        return [_serialize_authorization(item) for item in data]
    return _serialize_authorization(data)
