# ==============================================================================
# SERVICIO DE USUARIOS
# ==============================================================================
# CRUD de usuarios contra la API.
#
# - El documento es la clave y no cambia después de crear el usuario
# - La contraseña se envía a la API pero nunca se guarda en el store
# - La verificación de credenciales (login) NO es responsabilidad de
#   este servicio: la hace un colaborador de autenticación externo
# ==============================================================================

import logging
from typing import Any, Dict, List

from app_pos.errors import ConflictError, NotFoundError
from app_pos.models import EntityKind, User
from app_pos.services.sync import EntitySyncService
from app_pos.services.validation import validate_registration, validate_user

logger = logging.getLogger(__name__)


class UserService(EntitySyncService[User]):
    """
    Servicio para gestión de usuarios.

    Responsabilidades:
    - Cargar usuarios
    - Registro con verificación de documento/email duplicados
    - Alta, edición y baja
    """

    kind = EntityKind.USERS
    key_field = 'documento'

    def _fetch_all(self) -> List[Dict[str, Any]]:
        return self.gateway.list_users()

    def _parse(self, data: Dict[str, Any]) -> User:
        return User.from_dict(data)

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def exists(self, documento: Any) -> bool:
        """
        Sonda de existencia en la API (GET /usuarios/{doc}).

        Returns:
            True si existe, False si la API responde 404

        Raises:
            GatewayError: Cualquier otro fallo
        """
        try:
            self.gateway.get_user(str(documento).strip())
        except NotFoundError:
            return False
        return True

    def email_in_use(self, email: str) -> bool:
        """Busca el email en el listado de la API (sin comparar credenciales)."""
        email = email.strip().lower()
        return any(
            (u.get('email') or '').strip().lower() == email
            for u in self.gateway.list_users()
        )

    # =========================================================================
    # ALTA / EDICIÓN / BAJA
    # =========================================================================

    def register(self, documento: Any, email: Any, contrasena: Any, confirmacion: Any) -> User:
        """
        Registro de un usuario nuevo.

        Valida el formulario, verifica que el documento y el email no
        estén registrados y luego crea el usuario.

        Raises:
            ValidationError: Formulario inválido
            ConflictError: Documento o email ya registrados
            GatewayError: Fallo de la API
        """
        data = validate_registration(documento, email, contrasena, confirmacion)
        if self.exists(data['documento']):
            raise ConflictError('Ya existe un usuario con este documento', field='documento')
        if self.email_in_use(data['email']):
            raise ConflictError('Ya existe un usuario con este correo electrónico', field='email')
        return self._create(data)

    def create(self, documento: Any, email: Any, contrasena: Any) -> User:
        """
        Crea un usuario desde el formulario de administración.

        Los duplicados los informa la API (409 → ConflictError).
        """
        data = validate_user(documento, email, contrasena, is_new=True)
        return self._create(data)

    def _create(self, data: Dict[str, Any]) -> User:
        response = self.gateway.create_user(data)
        user = self._reconcile(response, data)
        logger.info("Usuario creado: %s", user.documento)
        return self._store(user)

    def update(self, documento: Any, email: Any, contrasena: Any = None) -> User:
        """
        Edita un usuario. El documento no se puede cambiar.

        Args:
            documento: Documento del usuario a editar
            email: Nuevo email
            contrasena: Nueva contraseña (opcional, solo si se quiere cambiar)
        """
        documento = str(documento).strip()
        data = validate_user(documento, email, contrasena, is_new=False)
        response = self.gateway.update_user(documento, data)
        return self._store(self._reconcile(response, data, key=documento))

    def delete(self, documento: Any) -> None:
        documento = str(documento).strip()
        self.gateway.delete_user(documento)
        self._remove(documento)
