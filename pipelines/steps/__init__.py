# Namespace for pipeline steps
from .map_fields import MapFields  # noqa: F401
from .transform_fields import TransformFields  # noqa: F401
from .validate_fields import ValidateFields  # noqa: F401
