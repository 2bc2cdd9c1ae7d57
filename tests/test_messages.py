import pytest
from pydantic import TypeAdapter

from generic_tool_orchestrator.llm_core.exceptions import ConfigurationError
from generic_tool_orchestrator.llm_core.messages import (
    AssistantMessage,
    AssistantWithToolsMessage,
    Document,
    DocumentCollection,
    Message,
    SystemMessage,
    UserMessage,
    generate_assistant_message,
    generate_messages,
    generate_system_message,
    generate_user_message,
)


class TestMessageHelpers:
    """Tests for the message construction helpers."""

    def test_user_message(self):
        message = generate_user_message("Hello")
        assert message.role == "user"
        assert message.content == "Hello"
        assert message.id
        assert message.created_at > 0

    def test_ids_are_unique(self):
        assert generate_user_message("a").id != generate_user_message("a").id

    def test_system_message_without_documents(self):
        message = generate_system_message("Be brief.")
        assert message == SystemMessage(id=message.id, created_at=message.created_at, content="Be brief.")

    def test_system_message_with_documents(self):
        documents = DocumentCollection([Document(id="d1", title="Manual", content="Press the red button.")])

        message = generate_system_message("Be brief.", "Use these:\n{{documents}}", documents)

        assert message.content.startswith("Be brief.\nUse these:\n<Documents>\n")
        assert "<Document id='d1' type='text' title='Manual' source='n/a'>Press the red button.</Document>" in message.content
        assert message.content.endswith("</Documents>")

    def test_system_message_documents_need_template(self):
        documents = DocumentCollection([Document(title="Manual", content="...")])
        with pytest.raises(ConfigurationError, match="must be provided"):
            generate_system_message("Be brief.", None, documents)

    def test_system_message_template_needs_placeholder(self):
        documents = DocumentCollection([Document(title="Manual", content="...")])
        with pytest.raises(ConfigurationError, match="placeholder"):
            generate_system_message("Be brief.", "No placeholder here", documents)

    def test_empty_collection_is_ignored(self):
        message = generate_system_message("Be brief.", None, DocumentCollection())
        assert message.content == "Be brief."

    def test_assistant_message_without_tool_calls(self):
        message = generate_assistant_message(None)
        assert isinstance(message, AssistantMessage)
        assert message.content == ""

    def test_assistant_message_with_tool_calls(self, make_call):
        message = generate_assistant_message("", tool_calls=[make_call()], message_id="m1")
        assert isinstance(message, AssistantWithToolsMessage)
        assert message.id == "m1"
        assert message.content is None
        assert message.tool_calls[0].name == "get_weather"

    def test_generate_messages(self):
        only_user = generate_messages("Hi")
        with_system = generate_messages("Hi", "Be brief.")

        assert [m.role for m in only_user] == ["user"]
        assert [m.role for m in with_system] == ["system", "user"]
        assert with_system[0].content == "Be brief."

    def test_message_union_discriminates_on_role(self, make_call):
        adapter = TypeAdapter(Message)
        dumped = AssistantWithToolsMessage(tool_calls=[make_call()]).model_dump()

        assert isinstance(adapter.validate_python(dumped), AssistantWithToolsMessage)
        assert isinstance(adapter.validate_python({"role": "user", "content": "Hi"}), UserMessage)

    def test_with_tool_calls_returns_copy(self, make_call):
        message = AssistantWithToolsMessage(tool_calls=[make_call()])
        updated = message.with_tool_calls([make_call().completed({"ok": True})])

        assert updated.id == message.id
        assert message.tool_calls[0].result is None
        assert updated.tool_calls[0].result == {"ok": True}


class TestDocuments:
    """Tests for document rendering."""

    def test_semantic_type_becomes_tag(self):
        doc = Document(id="p1", type="Product", title="Lamp", content="A lamp.", source="catalog", attributes={"sku": "L-1"})
        assert doc.to_xml() == "<Product id='p1' title='Lamp' source='catalog' sku='L-1'>A lamp.</Product>"

    def test_empty_collection_renders_dash(self):
        assert DocumentCollection().system_message_representation == "-"

    def test_collection_add_and_remove(self):
        collection = DocumentCollection()
        collection.add(Document(id="a", title="A", content="a"))
        collection.add(Document(id="b", title="B", content="b"))
        collection.add(Document(id="a", title="A2", content="a2"))
        collection.remove("b")
        collection.remove("missing")

        assert len(collection) == 1
        assert [doc.title for doc in collection] == ["A2"]
