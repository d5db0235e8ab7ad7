from .blueprint import make_blueprint
