"""Operation registry.

Operations register themselves: a module in pixel_image.operations that
defines an `operation` of type Operation is picked up by discover(). The
package's BUILTIN modules are always imported, even where pkgutil cannot
list the package (zipped or frozen installs).
"""

import importlib
import pkgutil

import pixel_image.operations as _package
from pixel_image.core.types import Operation

_registry: dict[str, Operation] = {}


def module_names() -> list[str]:
    """Built-in operation modules plus any others found in the package."""
    found = {name for _finder, name, _ispkg in pkgutil.iter_modules(_package.__path__) if not name.startswith('_')}
    return sorted(found.union(_package.BUILTIN))


def discover() -> dict[str, Operation]:
    """Import every operation module once; later calls return the cached registry."""
    if not _registry:
        for modname in module_names():
            module = importlib.import_module(f'{_package.__name__}.{modname}')
            op = getattr(module, 'operation', None)
            if isinstance(op, Operation):
                _registry[op.name] = op
    return _registry


def get(name: str) -> Operation:
    reg = discover()
    if name not in reg:
        raise KeyError(f'Unknown operation: {name}. Available: {", ".join(sorted(reg))}')
    return reg[name]


def all_operations() -> dict[str, Operation]:
    return discover()
