"""fabrik - Declarative factories for building test objects."""

from .errors import AssignmentError as AssignmentError
from .errors import FactoryError as FactoryError
from .errors import InstantiationError as InstantiationError
from .factory import Factory as Factory
from .hooks import after_build as after_build
from .sequences import SequenceStore as SequenceStore
from .traits import Trait as Trait
from .values import Lazy as Lazy
from .values import Plain as Plain
from .values import Sequence as Sequence
from .values import lazy as lazy
from .values import sequence as sequence
