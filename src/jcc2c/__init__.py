"""jcc2c: convert JaCoCo XML coverage reports into Cobertura XML."""

__version__ = "0.1.0"
