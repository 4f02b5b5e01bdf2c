"""
Resolution of Java packages for types owned by other modules.
"""

from ...core.interface import ComponentInterface, crate_name_of
from ....logging_config import get_logger
from .config import JavaConfig

logger = get_logger(__name__)

DEFAULT_PACKAGE_PREFIX = "uniffi"


def package_for(config: JavaConfig, module_path: str, display_name: str) -> str:
    """
    Java package holding the bindings of another module.

    Overrides in ``external_packages`` are keyed by the root crate of the
    module path. Without one the package is ``uniffi.<display_name>``.

    Args:
        config: Java settings
        module_path: Module path of the external type (``crate::sub``)
        display_name: Name used to derive the fallback package

    Returns:
        Dotted Java package name
    """
    crate_name = crate_name_of(module_path)
    package = config.external_packages.get(crate_name)
    if package is not None:
        return package

    logger.warning(
        "No external package configured for crate %r, falling back to %s.%s",
        crate_name,
        DEFAULT_PACKAGE_PREFIX,
        display_name,
    )
    return f"{DEFAULT_PACKAGE_PREFIX}.{display_name}"


def potentially_add_external_package(
    config: JavaConfig, ci: ComponentInterface, type_name: str, display_name: str
) -> str:
    """
    Qualify a display name with its package when the type is external.

    Local types and names the interface does not know are returned unchanged.
    """
    type_ = ci.get_type(type_name)
    if type_ is None or not ci.is_external(type_):
        return display_name
    return f"{package_for(config, type_.module_path, display_name)}.{display_name}"
