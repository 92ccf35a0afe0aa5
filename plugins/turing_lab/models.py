"""
Model registry: dispatch by stored model id.

The controller keeps a model id string and looks the model up here, so a
model switch is just a different key.
"""

from .gray_scott import GrayScott
from .fitzhugh_nagumo import FitzhughNagumo
from .schnakenberg import Schnakenberg
from .presets import MODEL_ORDER

DEFAULT_MODEL = "gray-scott"

MODEL_CLASSES = {
    "gray-scott": GrayScott,
    "fitzhugh-nagumo": FitzhughNagumo,
    "schnakenberg": Schnakenberg,
}

# Models carry no state, one shared instance each is enough
_INSTANCES = {model_id: cls() for model_id, cls in MODEL_CLASSES.items()}


def get_model(model_id):
    """Return the model instance for an id. Raises KeyError if unknown."""
    return _INSTANCES[model_id]


def resolve_model_id(model_id):
    """Return model_id if known, else the default model id."""
    return model_id if model_id in MODEL_CLASSES else DEFAULT_MODEL


def list_models():
    """Return list of (model_id, label) in display order."""
    return [(m, MODEL_CLASSES[m].model_label) for m in MODEL_ORDER]
