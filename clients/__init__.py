# Infrastructure clients
from clients.postgres_client import PostgresClient
from clients.valkey_client import ValkeyClient
