# File: tests/integration/conftest.py
# Contains pytest fixtures for running the generator against a live PostgreSQL.

import sys
import uuid
from pathlib import Path
from typing import Any, Dict, Generator

import psycopg2
import pytest
from jinja2 import Environment, FileSystemLoader
from testcontainers.postgres import PostgresContainer


# --- Constants ---
TESTS_ROOT = Path(__file__).parent.parent
TEST_SCHEMAS_DIR = TESTS_ROOT / "schemas"
TEST_CONFIG_TEMPLATES_DIR = TESTS_ROOT / "config_templates"


# --- Fixture for Database Container (using Testcontainers) ---
@pytest.fixture(scope="session")
def pg_service() -> Generator[Dict[str, Any], Any, None]:
    """
    Starts/stops a PostgreSQL container for the test session.
    Skips the integration tests when no container runtime is available.
    """
    pg_container = PostgresContainer(
        image="postgres:15-alpine",
        username="testuser",
        password="testpassword",
        dbname="testdb",
    )
    try:
        pg_container.start()
    except Exception as e:
        pytest.skip(f"PostgreSQL testcontainer unavailable: {e}")

    try:
        yield {
            "host": pg_container.get_container_host_ip(),
            "port": int(pg_container.get_exposed_port(5432)),
            "user": pg_container.username,
            "password": pg_container.password,
            "db_name": pg_container.dbname,
        }
    finally:
        pg_container.stop()


# --- Fixture to Load Database Schema ---
@pytest.fixture(scope="session")
def shop_database(pg_service: Dict[str, Any]) -> Dict[str, Any]:
    """Loads tests/schemas/shop.sql into the container database."""
    schema_file = TEST_SCHEMAS_DIR / "shop.sql"
    conn = psycopg2.connect(
        dbname=pg_service["db_name"],
        user=pg_service["user"],
        password=pg_service["password"],
        host=pg_service["host"],
        port=pg_service["port"],
        connect_timeout=5,
    )
    try:
        with conn.cursor() as cursor:
            cursor.execute(schema_file.read_text(encoding="utf-8"))
        conn.commit()
    finally:
        conn.close()
    return pg_service


# --- Fixture to Create Test Configuration File ---
@pytest.fixture(scope="module")
def generator_config_file(shop_database: Dict[str, Any], tmp_path_factory) -> Path:
    """Renders the generator configuration for the container database."""
    base_dir = tmp_path_factory.mktemp("generated_module_")
    env = Environment(loader=FileSystemLoader(TEST_CONFIG_TEMPLATES_DIR), autoescape=False)
    rendered_config = env.get_template("test_config.yaml.j2").render(
        package_name=f"generated_{uuid.uuid4().hex}.models",
        output_dir=str(base_dir / "src"),
        db_host=shop_database["host"],
        db_port=shop_database["port"],
        db_name=shop_database["db_name"],
        db_user=shop_database["user"],
        db_password=shop_database["password"],
    )
    config_file = base_dir / "test_run_config.yaml"
    config_file.write_text(rendered_config, encoding="utf-8")
    return config_file


@pytest.fixture(scope="module")
def importable_output():
    """Makes generated source roots importable for the duration of a module."""
    added = []

    def _add(source_root: Path):
        sys.path.insert(0, str(source_root))
        added.append(str(source_root))

    yield _add
    for path in added:
        sys.path.remove(path)
