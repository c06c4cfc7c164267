"""Auth handlers — login/logout, user accounts and roles."""

from agenda.application.services import auth_service, role_service, user_service
from agenda.core.exceptions import EntityNotFoundException, InvalidCredentialsException
from agenda.domain.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    RoleUpdate,
    SessionContext,
    UserCreate,
    UserUpdateRequest,
)
from agenda.domain.schemas.common import IdRequest
from agenda.interfaces.dispatcher import Router

router = Router(prefix="auth")
roles_router = Router(prefix="roles")

LOGIN_FAILED = "Usuario o contraseña incorrectos"


@router.handle("login", payload=LoginRequest)
def login(ctx, body: LoginRequest):
    try:
        session, user = auth_service.login(ctx.db, body.usuario, body.password)
    except (EntityNotFoundException, InvalidCredentialsException) as exc:
        # never reveal which of the two was wrong
        raise InvalidCredentialsException(LOGIN_FAILED) from exc

    ctx.session = session
    return user


@router.handle("logout")
def logout(ctx, _):
    ctx.session = None
    return None


@router.handle("getUsers")
def get_users(ctx, _):
    return user_service.get_users(ctx.db)


@router.handle("createUser", payload=UserCreate)
def create_user(ctx, body: UserCreate):
    return user_service.create_user(ctx.db, ctx.session, body)


@router.handle("updateUser", payload=UserUpdateRequest)
def update_user(ctx, body: UserUpdateRequest):
    user = user_service.update_user(ctx.db, ctx.session, body.id, body.data)
    if ctx.session is not None and ctx.session.user_id == user.id:
        ctx.session = SessionContext(user_id=user.id, level=user.level)
    return user


@router.handle("deleteUser", payload=IdRequest)
def delete_user(ctx, body: IdRequest):
    user_service.delete_user(ctx.db, ctx.session, body.id)
    return None


@router.handle("changePassword", payload=ChangePasswordRequest)
def change_password(ctx, body: ChangePasswordRequest):
    user_service.change_password(ctx.db, ctx.session, body.id, body.current_password, body.new_password)
    return None


@roles_router.handle("getAll")
def get_roles(ctx, _):
    return role_service.get_roles(ctx.db)


@roles_router.handle("update", payload=RoleUpdate)
def update_role(ctx, body: RoleUpdate):
    return role_service.update_role(ctx.db, ctx.session, body)
