from uuid import uuid4

from stepup_core import log_action

from .defaults import DEFAULT_TYPES, REST_TYPE, STORE_KEY
from .errors import DuplicateTypeError, NotFoundError, StorageReadError, ValidationError
from .models import RestDay, StoreDocument, parse_date, record_id, with_id
from .storage import read_document, write_document


def new_workout_id():
    return f"uuid-{uuid4().hex}"


# ───────── Pure document operations ─────────

def add_workout(document: StoreDocument, workout, id_factory=new_workout_id):
    """Return ``(new_document, saved_workout)`` with a fresh, unused id."""
    taken = {w.id for w in document.workouts}
    taken.update(record_id(r) for r in document.unreadable_workouts)
    workout_id = id_factory()
    while workout_id in taken:
        workout_id = id_factory()
    saved = with_id(workout, workout_id)
    return document.evolve(workouts=document.workouts + (saved,)), saved


def replace_workout(document: StoreDocument, workout) -> StoreDocument:
    if workout.id is None:
        raise NotFoundError(workout.id)
    if any(w.id == workout.id for w in document.workouts):
        workouts = tuple(workout if w.id == workout.id else w for w in document.workouts)
        return document.evolve(workouts=workouts)
    # Saving over an unreadable record repairs it
    unreadable = tuple(r for r in document.unreadable_workouts if record_id(r) != workout.id)
    if len(unreadable) == len(document.unreadable_workouts):
        raise NotFoundError(workout.id)
    return document.evolve(workouts=document.workouts + (workout,), unreadable_workouts=unreadable)


def remove_workout(document: StoreDocument, workout_id) -> StoreDocument:
    if workout_id is None:
        return document
    workouts = tuple(w for w in document.workouts if w.id != workout_id)
    unreadable = tuple(r for r in document.unreadable_workouts if record_id(r) != workout_id)
    if len(workouts) == len(document.workouts) and len(unreadable) == len(document.unreadable_workouts):
        return document
    return document.evolve(workouts=workouts, unreadable_workouts=unreadable)


def add_custom_type(document: StoreDocument, name) -> StoreDocument:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Type name cannot be empty.", "name")
    if name in DEFAULT_TYPES or name == REST_TYPE or name in document.custom_types:
        raise DuplicateTypeError(name)
    return document.evolve(custom_types=document.custom_types + (name,))


# ───────── Store-backed repository ─────────

class WorkoutRepository:
    """
    Workout CRUD over a key-value store.

    Every mutation reads the whole document, applies one of the pure
    operations above and writes the whole document back. Listing degrades to
    an empty document when the store cannot be read; mutations do not, so a
    corrupt store is never overwritten.
    """

    def __init__(self, store, key=STORE_KEY, id_factory=new_workout_id):
        self.store = store
        self.key = key
        self.id_factory = id_factory

    def load(self) -> StoreDocument:
        try:
            return read_document(self.store, self.key)
        except StorageReadError as e:
            log_action("storage_read_failed", {"error": str(e)})
            return StoreDocument()

    def _load_for_update(self) -> StoreDocument:
        return read_document(self.store, self.key)

    def _commit(self, document: StoreDocument):
        if document.revision == 0:
            return
        write_document(self.store, document, self.key)

    def list_workouts(self):
        return list(self.load().workouts)

    def save_workout(self, workout):
        document, saved = add_workout(self._load_for_update(), workout, self.id_factory)
        self._commit(document)
        return saved

    def update_workout(self, workout):
        self._commit(replace_workout(self._load_for_update(), workout))

    def delete_workout(self, workout_id):
        self._commit(remove_workout(self._load_for_update(), workout_id))

    def list_custom_types(self):
        seen = []
        for name in self.load().custom_types:
            if name not in DEFAULT_TYPES and name not in seen:
                seen.append(name)
        return seen

    def add_custom_type(self, name):
        self._commit(add_custom_type(self._load_for_update(), name))

    def save_rest_day(self, day):
        day = parse_date(day)
        current = self._load_for_update()
        for w in current.workouts:
            if w.is_rest_day and w.date == day:
                return w
        document, saved = add_workout(current, RestDay(date=day), self.id_factory)
        self._commit(document)
        return saved
