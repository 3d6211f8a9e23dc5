class StepUpError(Exception):
    """Base class for every error raised by the StepUp core."""


class StorageError(StepUpError):
    pass


class StorageReadError(StorageError):
    pass


class StorageWriteError(StorageError):
    pass


class DuplicateTypeError(StepUpError):
    def __init__(self, name):
        super().__init__(f"Workout type '{name}' already exists.")
        self.name = name


class ValidationError(StepUpError):
    def __init__(self, message, field=None):
        super().__init__(message)
        self.field = field


class NotFoundError(StepUpError):
    def __init__(self, workout_id):
        super().__init__(f"No workout with id '{workout_id}'.")
        self.workout_id = workout_id
