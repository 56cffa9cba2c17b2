import strawberry
from strawberry.fastapi import GraphQLRouter

from futureagent.core.database import get_repository
from futureagent.graphql.queries import Query


async def get_context():
    """
    Provide the repository to resolvers.

    GraphQL resolvers execute concurrently, but SQLAlchemy async sessions
    don't support concurrent operations. The repository opens a session
    per read, so resolvers can share it.
    """
    return {
        "repository": get_repository(),
    }


schema = strawberry.Schema(query=Query)

graphql_router = GraphQLRouter(
    schema,
    context_getter=get_context,
)
