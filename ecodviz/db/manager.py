#!/usr/bin/env python3
"""
Database manager for ecodviz
Handles read-only connections and queries against the ECOD database
"""
import psycopg2
import psycopg2.extras
import logging
from contextlib import contextmanager
from typing import Dict, Any, List, Tuple, Optional, Generator, Union

from ecodviz.exceptions import ConnectionError, QueryError

CONNECTION_FIELDS = ('host', 'port', 'database', 'user', 'password', 'sslmode')


class DBManager:
    """Database manager for the ECOD classification database"""

    def __init__(self, config: Dict[str, Any]):
        """Initialize database manager

        Args:
            config: Database configuration dictionary

        Raises:
            ConnectionError: If a required connection field is missing
        """
        self.logger = logging.getLogger("ecodviz.db")

        required_fields = ['host', 'port', 'database', 'user']
        for field in required_fields:
            if field not in config:
                raise ConnectionError(f"Missing required database configuration field: {field}")

        # Only pass through keywords psycopg2.connect understands
        self.config = {k: v for k, v in config.items() if k in CONNECTION_FIELDS}

    @contextmanager
    def get_connection(self) -> Generator[psycopg2.extensions.connection, None, None]:
        """Context manager for database connections

        Yields:
            Database connection

        Raises:
            ConnectionError: If connection fails
        """
        conn = None
        try:
            conn = psycopg2.connect(**self.config)
        except psycopg2.Error as e:
            error_msg = f"Database connection error: {str(e)}"
            self.logger.error(error_msg)
            raise ConnectionError(error_msg, {"host": self.config.get('host'),
                                              "database": self.config.get('database')}) from e
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def execute_query(self, query: str, params: Optional[Union[Tuple, Dict[str, Any]]] = None) -> List[Tuple]:
        """Execute a query and return results

        Args:
            query: SQL query
            params: Query parameters

        Returns:
            List of result tuples

        Raises:
            QueryError: If query execution fails
        """
        try:
            with self.get_connection() as conn:
                with conn.cursor() as cursor:
                    cursor.execute(query, params or ())
                    if cursor.description:  # If the query returns rows
                        return cursor.fetchall()
                    return []
        except psycopg2.Error as e:
            error_msg = f"Query execution error: {str(e)}"
            self.logger.error(f"{error_msg}\nQuery: {query}\nParams: {params}")
            raise QueryError(error_msg, {"query": query, "params": params,
                                         "code": getattr(e, 'pgcode', None)}) from e

    def execute_dict_query(self, query: str, params: Optional[Union[Tuple, Dict[str, Any]]] = None) -> List[Dict[str, Any]]:
        """Execute a query and return results as dictionaries

        Args:
            query: SQL query
            params: Query parameters

        Returns:
            List of result dictionaries

        Raises:
            QueryError: If query execution fails
        """
        try:
            with self.get_connection() as conn:
                with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cursor:
                    cursor.execute(query, params or ())
                    if cursor.description:  # If the query returns rows
                        return [dict(row) for row in cursor.fetchall()]
                    return []
        except psycopg2.Error as e:
            error_msg = f"Query execution error: {str(e)}"
            self.logger.error(f"{error_msg}\nQuery: {query}\nParams: {params}")
            raise QueryError(error_msg, {"query": query, "params": params,
                                         "code": getattr(e, 'pgcode', None)}) from e

    def test_connection(self) -> bool:
        """Check that the database answers a trivial query"""
        try:
            self.execute_query("SELECT 1")
            return True
        except (ConnectionError, QueryError) as e:
            self.logger.warning(f"Database connection test failed: {e.message}")
            return False
