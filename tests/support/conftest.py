import pytest


@pytest.fixture(autouse=True)
def support_context():
    """Run every test inside the support domain context."""
    from support.domain import support

    ctx = support.domain_context()
    ctx.push()

    yield

    ctx.pop()


@pytest.fixture
def start_conversation():
    """Open (or resume) a conversation for ``customer_id``; return its id."""
    from protean import current_domain
    from support.chat.commands import StartConversation

    def _start(customer_id="customer-001", name="Amina Otieno", email="amina@example.com"):
        return current_domain.process(
            StartConversation(customer_id=customer_id, customer_name=name, customer_email=email),
            asynchronous=False,
        )

    return _start


@pytest.fixture
def post_message():
    from protean import current_domain
    from support.chat.commands import PostMessage

    def _post(conversation_id, text, sender_id="customer-001", sender_type="customer"):
        return current_domain.process(
            PostMessage(conversation_id=conversation_id, sender_id=sender_id, sender_type=sender_type, message=text),
            asynchronous=False,
        )

    return _post
