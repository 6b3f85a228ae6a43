"""
ioaction runtime: IO actions as values.

  build: constructing an action describes an effect, it performs nothing.
  run:   ActionEngine.run evaluates the tree against a Console, in order.

| Layer             | Purpose                                        |
<------------------ + ---------------------------------------------- >
| **core**          | Print, ReadLine, Pure, Bind, Sequence, Forever |
| **console**       | stream and scripted console capabilities       |
| **cancel**        | cooperative cancellation for Forever           |
| **engine**        | stack-based evaluator producing an Outcome     |
| **programs**      | walkthrough example programs                   |
| **analysis**      | tree dump, hash, networkx/Graphviz rendering   |
| **logbook**       | signed JSONL ledger of runs                    |
"""

from . import analysis as _analysis
from . import cancel as _cancel
from . import console as _console
from . import core as _core
from . import engine as _engine
from . import logbook as _logbook
from . import programs as _programs
from .cli import main, parse_args

from .core import *
from .console import *
from .cancel import *
from .engine import *
from .programs import *
from .analysis import *
from .logbook import *

__all__ = []
for module in (_core, _console, _cancel, _engine, _programs, _analysis, _logbook):
    __all__.extend(getattr(module, "__all__", []))
__all__ += ["main", "parse_args"]
__all__ = list(dict.fromkeys(__all__))
