"""
Lazy traversal of cursor-paginated GraphQL connections.

A page is requested only when the consumer asks for a node and the buffered
page is exhausted, so a consumer that stops early never triggers the next
request.
"""

from collections import deque
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from mergeme.exceptions import PageShapeError
from mergeme.logging import get_logger
from mergeme.types.executor import QueryExecutor

T = TypeVar("T")

logger = get_logger("http")

ExtractList = Callable[[dict[str, Any]], Any]


class GraphQLIterator(Generic[T]):
    """
    Single-pass async iterator over the nodes of a paginated connection.

    Each page must expose ``nodes`` and ``pageInfo.{hasNextPage,endCursor}``.
    The iterator is not restartable; build a new one per traversal.
    """

    def __init__(
        self,
        executor: QueryExecutor,
        query: str,
        parameters: dict[str, Any],
        extract_list: ExtractList,
        parse_node: Callable[[Any], T] | None = None,
    ) -> None:
        """
        Initialize the iterator. No request is made until the first node is requested.

        Args:
            executor: Runs the query for each page
            query: GraphQL document accepting a ``cursor`` variable
            parameters: Variables sent with every page request
            extract_list: Returns the connection object from a response
            parse_node: Optional conversion applied to each raw node
        """
        self._executor = executor
        self._query = query
        self._parameters = dict(parameters)
        self._extract_list = extract_list
        self._parse_node = parse_node

        self._buffer: deque[Any] = deque()
        self._cursor: str | None = None
        self._has_next_page = True
        self.pages_fetched = 0

    def __aiter__(self) -> "GraphQLIterator[T]":
        return self

    async def __anext__(self) -> T:
        while not self._buffer:
            if not self._has_next_page:
                raise StopAsyncIteration
            await self._fetch_page()

        node = self._buffer.popleft()
        if self._parse_node is not None:
            return self._parse_node(node)
        return node

    async def _fetch_page(self) -> None:
        variables = {**self._parameters, "cursor": self._cursor}
        response = await self._executor.execute(self._query, variables)
        self.pages_fetched += 1

        try:
            page = self._extract_list(response)
        except (KeyError, TypeError) as e:
            raise PageShapeError(f"Could not locate paginated list: {e}") from e

        if not isinstance(page, dict):
            raise PageShapeError(
                f"Expected a paginated list in response, got {type(page).__name__}"
            )

        nodes = page.get("nodes")
        page_info = page.get("pageInfo")
        if not isinstance(nodes, list) or not isinstance(page_info, dict):
            raise PageShapeError("Paginated list is missing 'nodes' or 'pageInfo'")

        has_next_page = page_info.get("hasNextPage") is True
        end_cursor = page_info.get("endCursor")
        if has_next_page and (end_cursor is None or end_cursor == self._cursor):
            raise PageShapeError(
                f"Page {self.pages_fetched} reports more pages but its cursor did not advance"
            )

        self._buffer.extend(nodes)
        self._has_next_page = has_next_page
        self._cursor = end_cursor

        logger.debug(
            "Fetched page %d with %d nodes (hasNextPage=%s)",
            self.pages_fetched,
            len(nodes),
            self._has_next_page,
        )


def make_graphql_iterator(
    executor: QueryExecutor,
    *,
    query: str,
    parameters: dict[str, Any],
    extract_list: ExtractList,
    parse_node: Callable[[Any], T] | None = None,
) -> GraphQLIterator[T]:
    """Build a fresh iterator over a paginated connection."""
    return GraphQLIterator(
        executor,
        query=query,
        parameters=parameters,
        extract_list=extract_list,
        parse_node=parse_node,
    )
