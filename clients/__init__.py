# Storage backends
from clients.storage import KeyValueStorage
from clients.memory_storage import InMemoryStorage
from clients.file_storage import FileStorage, FileStorageError
from clients.valkey_client import ValkeyClient
