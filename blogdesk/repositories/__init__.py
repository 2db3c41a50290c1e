# Import all repository functions to maintain compatibility
from blogdesk.repositories.user import (
    get_user_by_id,
    get_user_by_username,
    create_user,
    mark_user_verified,
)
from blogdesk.repositories.blog import (
    get_blog_by_id,
    count_matching,
    create_blog,
    update_blog,
    delete_blog,
)

__all__ = [
    # User repositories
    "get_user_by_id",
    "get_user_by_username",
    "create_user",
    "mark_user_verified",
    # Blog repositories
    "get_blog_by_id",
    "count_matching",
    "create_blog",
    "update_blog",
    "delete_blog",
]
