"""Product comments — shopper feedback shown under a product."""

from datetime import UTC, datetime

from protean import handle, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String, Text
from protean.utils.globals import current_domain

from store.domain import store
from store.product.events import CommentPosted
from store.product.product import Product


@store.aggregate
class ProductComment:
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    author_name = String(max_length=255)
    comment = Text(required=True)
    created_at = DateTime()

    @invariant.post
    def comment_must_not_be_blank(self):
        if not (self.comment or "").strip():
            raise ValidationError({"comment": ["Comment cannot be empty"]})

    @classmethod
    def post(cls, product_id, user_id, comment, author_name=None):
        now = datetime.now(UTC)
        posted = cls(
            product_id=product_id,
            user_id=user_id,
            author_name=author_name,
            comment=comment.strip(),
            created_at=now,
        )
        posted.raise_(
            CommentPosted(
                comment_id=str(posted.id),
                product_id=str(product_id),
                user_id=str(user_id),
                posted_at=now,
            )
        )
        return posted


@store.repository(part_of=ProductComment)
class ProductCommentRepository:
    def for_product(self, product_id):
        """Comments on ``product_id``, newest first."""
        comments = self._dao.query.filter(product_id=str(product_id)).limit(None).all().items
        return sorted(comments, key=lambda c: c.created_at, reverse=True)


@store.command(part_of="ProductComment")
class AddComment:
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    author_name = String(max_length=255)
    comment = Text(required=True)


@store.command_handler(part_of=ProductComment)
class AddCommentHandler:
    @handle(AddComment)
    def add_comment(self, command):
        # Raises ObjectNotFoundError for unknown products
        current_domain.repository_for(Product).get(command.product_id)

        comment = ProductComment.post(
            product_id=command.product_id,
            user_id=command.user_id,
            comment=command.comment or "",
            author_name=command.author_name,
        )
        current_domain.repository_for(ProductComment).add(comment)
        return str(comment.id)
