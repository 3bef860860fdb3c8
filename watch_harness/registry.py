"""Discovery of per-capability test units.

Each module ``watch_harness/probes/probe_<capability>.py`` exports one
callable named ``probe``. Discovery scans the package at run time, so a new
capability test only needs a new module and a ``Capability`` member; the
orchestrator is untouched.

Discovery fails fast when the modules and the ``Capability`` enum disagree,
so a typo in a module name surfaces at startup rather than mid-run.
"""

import importlib
import pkgutil
from typing import Any, Awaitable, Callable, Iterator, Mapping

from watch_harness.capabilities import Capability
from watch_harness.exceptions import CapabilityRegistrationError
from watch_harness.logger import get_logger

log = get_logger(__name__)

TestUnit = Callable[..., Awaitable[None]]

PROBE_PACKAGE = "watch_harness.probes"
PROBE_PREFIX = "probe_"


class TestRegistry(Mapping[Capability, TestUnit]):
    """Name-indexed mapping of capability to test unit."""

    __test__ = False  # not a pytest test class

    def __init__(self, units: Mapping[Capability, TestUnit]) -> None:
        self._units: dict[Capability, TestUnit] = dict(units)

    def __getitem__(self, capability: Capability) -> TestUnit:
        return self._units[capability]

    def __iter__(self) -> Iterator[Capability]:
        return iter(self._units)

    def __len__(self) -> int:
        return len(self._units)

    @classmethod
    def discover(
        cls,
        package: str = PROBE_PACKAGE,
        prefix: str = PROBE_PREFIX,
        require_all: bool = True,
    ) -> "TestRegistry":
        """Import every ``<prefix>*`` module of ``package`` and bind its probe.

        Args:
            package: Dotted name of the package holding the probe modules.
            prefix: Module name prefix stripped to obtain the capability name.
            require_all: Fail if any Capability has no probe module.

        Raises:
            CapabilityRegistrationError: On unknown, malformed or missing probes.
        """
        root = importlib.import_module(package)
        units: dict[Capability, TestUnit] = {}

        for module_info in pkgutil.iter_modules(root.__path__):
            if not module_info.name.startswith(prefix):
                continue
            name = module_info.name[len(prefix):]
            try:
                capability = Capability(name)
            except ValueError as exc:
                raise CapabilityRegistrationError(name, "no such capability") from exc

            module = importlib.import_module(f"{package}.{module_info.name}")
            units[capability] = _probe_of(module, name)

        if require_all:
            missing = [capability.value for capability in Capability if capability not in units]
            if missing:
                raise CapabilityRegistrationError(", ".join(missing), "no probe module found")

        log.debug("Test registry discovered", package=package, capabilities=len(units))
        return cls(units)


def _probe_of(module: Any, name: str) -> TestUnit:
    probe = getattr(module, "probe", None)
    if not callable(probe):
        raise CapabilityRegistrationError(name, f"module {module.__name__} has no callable 'probe'")
    return probe
