"""Create solvers by name.

Names are resolved case-insensitively, in this order:

1. solvers registered at runtime with :func:`register_solver`
2. built-in plugins (``scipy-slsqp``, ``scipy-trust-constr``, ``ipopt``)
3. entry points in the ``nlpbench.solvers`` group, each pointing to a
   ``create_solver(problem, config)`` callable
4. plugin modules named ``nlpbench_plugin_<name>.py`` (dashes replaced by
   underscores) in the directories of ``SolverConfig.plugin_path``, which
   must define ``create_solver(problem, config)``
"""

from __future__ import annotations

import importlib.util
from importlib import metadata
from pathlib import Path
from types import ModuleType
from typing import Callable, Dict, List, Optional

from ..core.problem import Problem
from ..logging import get_logger
from .base import Solver, SolverConfig
from .ipopt_solver import create_ipopt_solver
from .scipy_solver import create_slsqp_solver, create_trust_constr_solver

log = get_logger(__name__)

ENTRY_POINT_GROUP = "nlpbench.solvers"
PLUGIN_PREFIX = "nlpbench_plugin_"

SolverFactory = Callable[[Problem, SolverConfig], Solver]

_BUILTIN_SOLVERS: Dict[str, SolverFactory] = {
    "scipy-slsqp": create_slsqp_solver,
    "scipy-trust-constr": create_trust_constr_solver,
    "ipopt": create_ipopt_solver,
}

_registered: Dict[str, SolverFactory] = {}


def register_solver(name: str, factory: SolverFactory) -> None:
    """Make ``factory`` available under ``name`` for :func:`create_solver`."""
    if not callable(factory):
        raise TypeError(f"Solver factory for {name!r} must be callable.")
    _registered[name.lower()] = factory


def unregister_solver(name: str) -> None:
    _registered.pop(name.lower(), None)


def _plugin_file(name: str, plugin_path: tuple[str, ...]) -> Optional[Path]:
    filename = PLUGIN_PREFIX + name.replace("-", "_") + ".py"
    for directory in plugin_path:
        candidate = Path(directory) / filename
        if candidate.is_file():
            return candidate
    return None


def _load_plugin_module(path: Path) -> ModuleType:
    spec = importlib.util.spec_from_file_location(path.stem, path)
    if spec is None or spec.loader is None:
        raise RuntimeError(f"Cannot load solver plugin from {path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _entry_point_factory(name: str) -> Optional[SolverFactory]:
    for entry_point in metadata.entry_points(group=ENTRY_POINT_GROUP):
        if entry_point.name.lower() == name:
            return entry_point.load()
    return None


def _resolve_factory(config: SolverConfig) -> SolverFactory:
    name = config.name.lower()
    if name in _registered:
        return _registered[name]
    if name in _BUILTIN_SOLVERS:
        return _BUILTIN_SOLVERS[name]
    factory = _entry_point_factory(name)
    if factory is not None:
        return factory
    path = _plugin_file(name, config.plugin_path)
    if path is not None:
        log.debug("Loading solver plugin %s", path)
        module = _load_plugin_module(path)
        factory = getattr(module, "create_solver", None)
        if not callable(factory):
            raise TypeError(f"Solver plugin {path} does not define create_solver().")
        return factory
    raise ValueError(
        f"Unsupported solver name '{config.name}'. "
        f"Supported names: {available_solvers(config)}"
    )


def create_solver(problem: Problem, config: SolverConfig) -> Solver:
    """
    Create the solver selected by ``config`` for ``problem``.

    Args:
        problem: Problem to solve; it is not modified.
        config: Solver configuration.

    Returns:
        A :class:`Solver` bound to ``problem``.

    Raises:
        ValueError: If no solver matches ``config.name``.
        TypeError: If a plugin does not honour the factory contract.
    """
    factory = _resolve_factory(config)
    solver = factory(problem, config)
    if not isinstance(solver, Solver):
        raise TypeError(
            f"Solver factory for {config.name!r} returned "
            f"{type(solver).__name__}, expected a Solver."
        )
    log.debug("Created solver %s", solver.name)
    return solver


def available_solvers(config: Optional[SolverConfig] = None) -> List[str]:
    """List every solver name resolvable with ``config``."""
    names = set(_BUILTIN_SOLVERS) | set(_registered)
    names.update(ep.name.lower() for ep in metadata.entry_points(group=ENTRY_POINT_GROUP))
    if config is not None:
        for directory in config.plugin_path:
            root = Path(directory)
            if not root.is_dir():
                continue
            for path in root.glob(PLUGIN_PREFIX + "*.py"):
                names.add(path.stem[len(PLUGIN_PREFIX):].replace("_", "-"))
    return sorted(names)


__all__ = [
    "ENTRY_POINT_GROUP",
    "PLUGIN_PREFIX",
    "SolverFactory",
    "available_solvers",
    "create_solver",
    "register_solver",
    "unregister_solver",
]
