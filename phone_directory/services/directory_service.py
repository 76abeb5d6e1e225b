"""Directory service owning the subscriber collection."""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional, Union

from phone_directory.config.logging import LoggingService, generate_session_id, set_session_id
from phone_directory.exceptions import PersistenceError, ValidationError
from phone_directory.models.schemas import PhoneNumber, PhoneType, Subscriber
from phone_directory.repositories.base import DirectoryRepository
from phone_directory.repositories.json_repository import JsonFileDirectoryRepository
from phone_directory.services import validator

logger = logging.getLogger(__name__)
logging_service = LoggingService(__name__)


def _subscriber_id(subscriber: Optional[Subscriber]) -> Optional[str]:
    return getattr(subscriber, "id", None)


class DirectoryService:
    """Service layer for subscriber and phone number operations.

    The service is the only mutator of the collection. Every successful
    mutation is applied in memory first and then persisted as a full
    snapshot; a failed write is logged and reported by ``save_data`` but
    never rolls the mutation back.
    """

    def __init__(self, repository: Optional[DirectoryRepository] = None):
        """Initialize the service and load the stored collection.

        Args:
            repository: Persistence gateway; defaults to the JSON snapshot
                file named by settings
        """
        self.repository = repository if repository is not None else JsonFileDirectoryRepository()
        self.session_id = generate_session_id()
        self.last_error: Optional[str] = None
        self.save_count = 0

        self._subscribers: List[Subscriber] = []
        self._defer_depth = 0
        self._dirty = False

        set_session_id(self.session_id)
        self._load_data()

    def _load_data(self) -> None:
        try:
            loaded = self.repository.load()
        except PersistenceError as e:
            logging_service.log_error(
                "Failed to load directory, starting empty",
                e,
                operation="load_data"
            )
            self._subscribers = []
            return

        self._subscribers = list(loaded)
        self.sort_subscribers()

        logging_service.log_operation(
            "info",
            "Directory loaded",
            operation="load_data",
            subscriber_count=len(self._subscribers)
        )

    def _is_present(self, subscriber: Subscriber) -> bool:
        return any(existing is subscriber for existing in self._subscribers)

    def _reject(self, operation: str, error: ValidationError,
                subscriber_id: Optional[str] = None) -> None:
        self.last_error = error.message
        logging_service.log_crud_operation(
            operation,
            success=False,
            subscriber_id=subscriber_id,
            error=error.message
        )

    def _persist(self) -> None:
        if self._defer_depth:
            self._dirty = True
            return
        self.save_data()

    @staticmethod
    def _coerce_phone_type(phone_type: Union[PhoneType, str, None]) -> PhoneType:
        """Accept a PhoneType, its display label or its enum name."""
        if isinstance(phone_type, PhoneType):
            return phone_type

        if isinstance(phone_type, str):
            resolved = PhoneType.from_label(phone_type)
            if resolved is None:
                resolved = PhoneType.__members__.get(phone_type.strip().upper())
            if resolved is not None:
                return resolved

        raise ValidationError(f"Unknown phone type: {phone_type!r}", field="type")

    def save_data(self) -> bool:
        """Write the full collection through the persistence gateway.

        Returns:
            True if the snapshot was written, False otherwise
        """
        self.save_count += 1
        try:
            self.repository.save(list(self._subscribers))
        except PersistenceError as e:
            self.last_error = e.message
            logging_service.log_error(
                "Failed to save directory",
                e,
                operation="save_data",
                subscriber_count=len(self._subscribers)
            )
            return False

        self._dirty = False
        logging_service.log_operation(
            "debug",
            "Directory saved",
            operation="save_data",
            subscriber_count=len(self._subscribers)
        )
        return True

    @contextmanager
    def deferred_save(self) -> Iterator["DirectoryService"]:
        """Group several mutations under a single snapshot write.

        Mutations inside the block skip their individual saves; one save runs
        when the outermost block exits, if anything changed. The save also
        runs when the block exits with an exception, since mutations applied
        before the error are already committed in memory.
        """
        self._defer_depth += 1
        try:
            yield self
        finally:
            self._defer_depth -= 1
            if self._defer_depth == 0 and self._dirty:
                self.save_data()

    def add_subscriber(self, last_name: str, first_name: str,
                       middle_name: Optional[str] = None) -> Optional[Subscriber]:
        """Create a subscriber with a fresh id and no phone numbers.

        Returns:
            The new Subscriber, or None if the name fields were rejected
        """
        try:
            validator.validate_subscriber_fields(last_name, first_name, middle_name)
        except ValidationError as e:
            self._reject("add_subscriber", e)
            return None

        subscriber = Subscriber(
            last_name=last_name,
            first_name=first_name,
            middle_name=middle_name
        )
        self._subscribers.append(subscriber)
        self.sort_subscribers()
        self._persist()

        logging_service.log_crud_operation(
            "add_subscriber",
            success=True,
            subscriber_id=subscriber.id,
            full_name=subscriber.full_name
        )
        return subscriber

    def update_subscriber(self, subscriber: Subscriber, last_name: str, first_name: str,
                          middle_name: Optional[str] = None) -> bool:
        """Rename an existing subscriber in place, keeping its id.

        Returns:
            True if updated, False if the names were rejected or the
            subscriber is not in the directory
        """
        try:
            validator.validate_subscriber_fields(last_name, first_name, middle_name)
        except ValidationError as e:
            self._reject("update_subscriber", e, subscriber_id=_subscriber_id(subscriber))
            return False

        if not self._is_present(subscriber):
            self.last_error = "Subscriber is not in the directory"
            logging_service.log_crud_operation(
                "update_subscriber",
                success=False,
                subscriber_id=_subscriber_id(subscriber),
                error=self.last_error
            )
            return False

        subscriber.rename(last_name, first_name, middle_name)
        self.sort_subscribers()
        self._persist()

        logging_service.log_crud_operation(
            "update_subscriber",
            success=True,
            subscriber_id=subscriber.id,
            full_name=subscriber.full_name
        )
        return True

    def delete_subscriber(self, subscriber: Subscriber) -> bool:
        """Remove a subscriber by identity.

        Returns:
            True if removed, False if it was not in the directory
        """
        for index, existing in enumerate(self._subscribers):
            if existing is subscriber:
                del self._subscribers[index]
                break
        else:
            logging_service.log_crud_operation(
                "delete_subscriber",
                success=False,
                subscriber_id=_subscriber_id(subscriber)
            )
            return False

        self._persist()

        logging_service.log_crud_operation(
            "delete_subscriber",
            success=True,
            subscriber_id=subscriber.id,
            full_name=subscriber.full_name
        )
        return True

    def add_phone_number(self, subscriber: Subscriber, number: str,
                         phone_type: Union[PhoneType, str]) -> bool:
        """Attach a phone number to a subscriber.

        Args:
            subscriber: Subscriber in this directory
            number: Phone number as entered; stored unchanged
            phone_type: PhoneType, or its display label or enum name

        Returns:
            True if added, False if the number is invalid, the type is
            unknown, the subscriber is not in the directory, or an equal
            phone number is already attached
        """
        try:
            validator.validate_phone_number(number)
            resolved_type = self._coerce_phone_type(phone_type)
        except ValidationError as e:
            self._reject("add_phone_number", e, subscriber_id=_subscriber_id(subscriber))
            return False

        if not self._is_present(subscriber):
            self.last_error = "Subscriber is not in the directory"
            logging_service.log_crud_operation(
                "add_phone_number",
                success=False,
                subscriber_id=_subscriber_id(subscriber),
                error=self.last_error
            )
            return False

        phone_number = PhoneNumber(number=number, type=resolved_type)
        if not subscriber.add_phone_number(phone_number):
            self.last_error = "Phone number already exists for subscriber"
            logging_service.log_crud_operation(
                "add_phone_number",
                success=False,
                subscriber_id=_subscriber_id(subscriber),
                error=self.last_error,
                phone=phone_number.formatted
            )
            return False

        self._persist()

        logging_service.log_crud_operation(
            "add_phone_number",
            success=True,
            subscriber_id=subscriber.id,
            phone=phone_number.formatted
        )
        return True

    def remove_phone_number(self, subscriber: Subscriber, phone_number: PhoneNumber) -> bool:
        """Detach the phone number equal to ``phone_number``.

        Returns:
            True if removed, False if no equal number is attached or the
            subscriber is not in the directory
        """
        if not self._is_present(subscriber) or not subscriber.remove_phone_number(phone_number):
            logging_service.log_crud_operation(
                "remove_phone_number",
                success=False,
                subscriber_id=_subscriber_id(subscriber),
                phone=getattr(phone_number, "formatted", None)
            )
            return False

        self._persist()

        logging_service.log_crud_operation(
            "remove_phone_number",
            success=True,
            subscriber_id=subscriber.id,
            phone=phone_number.formatted
        )
        return True

    def get_all_subscribers(self) -> List[Subscriber]:
        """Return all subscribers in current order."""
        return list(self._subscribers)

    def get_subscriber(self, subscriber_id: str) -> Optional[Subscriber]:
        for subscriber in self._subscribers:
            if subscriber.id == subscriber_id:
                return subscriber
        return None

    def search_subscribers(self, query: Optional[str]) -> List[Subscriber]:
        """Find subscribers with any name or phone field containing the query.

        A blank query returns every subscriber. Results keep the current
        collection order.
        """
        if query is None or not query.strip():
            return self.get_all_subscribers()

        results = [subscriber for subscriber in self._subscribers if subscriber.contains(query)]

        logging_service.log_operation(
            "debug",
            "Search completed",
            operation="search_subscribers",
            query=query,
            result_count=len(results)
        )
        return results

    def sort_subscribers(self) -> None:
        """Sort by last, first and middle name, case-insensitively."""
        self._subscribers.sort(key=lambda subscriber: subscriber.sort_key)

    def get_subscriber_count(self) -> int:
        return len(self._subscribers)

    def get_phone_number_count(self) -> int:
        return sum(len(subscriber.phone_numbers) for subscriber in self._subscribers)

    def clear_all_data(self) -> bool:
        """Remove every subscriber and persist the empty directory.

        Returns:
            True if the empty snapshot was written
        """
        self._subscribers.clear()
        logging_service.log_operation(
            "info",
            "Directory cleared",
            operation="clear_all_data"
        )
        if self._defer_depth:
            self._dirty = True
            return True
        return self.save_data()

    def create_backup(self, target: str) -> bool:
        """Copy the current snapshot through the gateway's backup support."""
        created = self.repository.backup(target)
        logging_service.log_operation(
            "info" if created else "warning",
            "Backup created" if created else "Backup not created",
            operation="create_backup",
            target=str(target)
        )
        return created
