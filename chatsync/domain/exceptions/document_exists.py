"""
DocumentExistsError - create() hit a path that is already taken.
"""


class DocumentExistsError(Exception):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Document already exists: {path}")
