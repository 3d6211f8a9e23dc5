#!/usr/bin/env python3
import os
import sys

from stepup_core import BASE_DIR
from stepup_app.errors import DuplicateTypeError, StorageError, ValidationError
from stepup_app.repository import WorkoutRepository
from stepup_app.storage import JsonFileStore, ensure_data_files

DATA_DIR = os.environ.get("STEPUP_DATA_DIR", os.path.join(BASE_DIR, "stepup_app", "data"))


def main(repository=None):
    if repository is None:
        repository = WorkoutRepository(JsonFileStore(ensure_data_files(DATA_DIR)))

    name = input("New workout type: ").strip()
    if not name:
        print("Type name cannot be empty.")
        return 1

    try:
        repository.add_custom_type(name)
    except DuplicateTypeError:
        print(f"Workout type '{name}' already exists.")
        return 1
    except ValidationError as e:
        print(str(e))
        return 1
    except StorageError as e:
        print(f"Failed to save custom type: {e}")
        return 1

    custom = repository.list_custom_types()
    print(f"Workout type '{name}' added. Custom types: {', '.join(custom)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
