from pathlib import Path
from typing import List, Optional
from ..util.const import STACK_DIR_NAME
from ..util.types import Result, ErrorInfo

class ConfigDiscovery:
    def __init__(self, start_cwd: str, home: Optional[str] = None) -> None:
        self.start_cwd = Path(start_cwd).resolve()
        self.home = Path(home).resolve() if home else Path.home()

    def discover_stack(self) -> Result[List[str]]:
        """Return ordered list of .vmodels dirs from CWD→parents→home (highest→lowest priority)."""
        try:
            stack: List[str] = []

            current = self.start_cwd
            while current != current.parent:
                layer = current / STACK_DIR_NAME
                if layer.is_dir():
                    stack.append(str(layer))
                current = current.parent

            # Home layer is lowest priority; the walk may already have passed it
            home_layer = self.home / STACK_DIR_NAME
            if home_layer.is_dir() and str(home_layer) not in stack:
                stack.append(str(home_layer))

            return Result(ok=True, value=stack)
        except OSError as e:
            return Result(ok=False, error=ErrorInfo("discovery.failed", str(e)))
