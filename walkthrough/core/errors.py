import pathlib as pl
import pathlib as pl

class ImporterError(Exception):
    # Base class for everything the scene importer raises.
#   # Base class for everything the scene importer raises.
    pass
#   pass

class ImportFailed(ImporterError):
    # Fatal for the whole load: the caller gets no meshes at all.
#   # Fatal for the whole load: the caller gets no meshes at all.
    def __init__(self, path: str | pl.Path, reason: str) -> None:
#   def __init__(self, path: str | pl.Path, reason: str) -> None:
        super().__init__(f"Failed to import {path}: {reason}")
#       super().__init__(f"Failed to import {path}: {reason}")
        self.path: pl.Path = pl.Path(path)
#       self.path: pl.Path = pl.Path(path)
        self.reason: str = reason
#       self.reason: str = reason
        pass
#       pass

class MalformedDocument(ImporterError):
    # An index or layout inside the document is inconsistent.
#   # An index or layout inside the document is inconsistent.
    # The assembler recovers by skipping the primitive (or material/texture) that hit it.
#   # The assembler recovers by skipping the primitive (or material/texture) that hit it.
    pass
#   pass

class MissingRequiredAttribute(ImporterError):
    # A primitive has no usable POSITION stream.
#   # A primitive has no usable POSITION stream.
    def __init__(self, attribute: str, reason: str = "missing") -> None:
#   def __init__(self, attribute: str, reason: str = "missing") -> None:
        super().__init__(f"Required attribute {attribute} is {reason}")
#       super().__init__(f"Required attribute {attribute} is {reason}")
        self.attribute: str = attribute
#       self.attribute: str = attribute
        pass
#       pass

class NoSceneAvailable(ImporterError):
    pass
#   pass
