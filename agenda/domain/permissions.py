"""Permission catalog. Ids are stored per role in roles.permissions."""

DASHBOARD = "dashboard"
SHIFT = "shift"
CUSTOMERS = "customers"
SERVICES = "services"

PERFIL = "perfil"
PERFIL_CUENTA = "perfil_cuenta"
PERFIL_SEGURIDAD = "perfil_seguridad"
PERFIL_USUARIOS = "perfil_usuarios"
PERFIL_PERMISOS = "perfil_permisos"

CONFIGURACION = "configuracion"
CONFIG_APARIENCIA = "config_apariencia"
CONFIG_SISTEMA = "config_sistema"

ALL_PERMISSIONS = [
    DASHBOARD,
    SHIFT,
    CUSTOMERS,
    SERVICES,
    PERFIL,
    PERFIL_CUENTA,
    PERFIL_SEGURIDAD,
    PERFIL_USUARIOS,
    PERFIL_PERMISOS,
    CONFIGURACION,
    CONFIG_APARIENCIA,
    CONFIG_SISTEMA,
]

# Seeded on first run; role 1 is the admin sentinel
DEFAULT_ROLES = [
    (1, "Administrador", ["*"]),
    (2, "Staff", [DASHBOARD, SHIFT, CUSTOMERS, SERVICES, PERFIL, PERFIL_CUENTA, PERFIL_SEGURIDAD]),
    (3, "Auditor", [DASHBOARD, CONFIGURACION, CONFIG_APARIENCIA]),
]
