import pickle

import pytest

from errchain.core.chain import CodedLink
from errchain.core.chain import DevMessagedLink
from errchain.core.chain import Link
from errchain.core.chain import LinkKind
from errchain.core.chain import MessagedLink
from errchain.core.chain import StackedLink
from errchain.core.config import CODE_CRITICAL
from errchain.core.stacktrace import StackFrame
from errchain.core.stacktrace import format_stack
from errchain.core.unwrap import cause
from errchain.core.unwrap import code
from errchain.core.unwrap import dev_message
from errchain.core.unwrap import dev_messages
from errchain.core.unwrap import message
from errchain.core.unwrap import stack_trace
from errchain.core.wrap import with_code
from errchain.core.wrap import with_dev_message
from errchain.core.wrap import with_message


@pytest.fixture
def frames():
    return (
        StackFrame(file="/srv/app/main.py", line_number=4, function="main"),
        StackFrame(file="/srv/app/jobs.py", line_number=9, function="run"),
    )


@pytest.mark.unit
class TestLinks:
    @pytest.mark.parametrize(
        "link, kind",
        [
            (CodedLink("USER"), LinkKind.CODED),
            (StackedLink(()), LinkKind.STACKED),
            (MessagedLink("try again"), LinkKind.MESSAGED),
            (DevMessagedLink(("db timeout",)), LinkKind.DEV_MESSAGED),
            (Link(), LinkKind.CAUSED),
        ],
    )
    def test_kind_tags(self, link, kind):
        assert link.kind is kind
        assert isinstance(link, Link)
        assert isinstance(link, Exception)
        assert link.cause is None

    def test_links_own_their_cause(self):
        leaf = ValueError("boom")
        link = MessagedLink("try again", leaf)
        assert link.cause is leaf

    @pytest.mark.parametrize(
        "link, attribute",
        [
            (CodedLink("USER"), "code"),
            (StackedLink(()), "frames"),
            (MessagedLink("hi"), "text"),
            (DevMessagedLink(("a",)), "notes"),
            (CodedLink("USER"), "cause"),
        ],
    )
    def test_fields_are_read_only(self, link, attribute):
        with pytest.raises(AttributeError):
            setattr(link, attribute, "changed")

    def test_stacked_link(self, frames):
        link = StackedLink(list(frames), code="PANIC")
        assert link.frames == frames
        assert link.code == "PANIC"
        assert link.stack == format_stack(frames)
        assert StackedLink(frames).code == ""

    def test_dev_messaged_link_joins_notes(self):
        link = DevMessagedLink(["connect", "refused"])
        assert link.notes == ("connect", "refused")
        assert link.dev_message == "connect: refused"

    def test_repr(self, frames):
        assert repr(CodedLink("USER")) == (
            "<CodedLink(code='USER', cause=None)>"
        )
        assert repr(MessagedLink("hi", ValueError("x"))) == (
            "<MessagedLink(text='hi', cause=ValueError('x'))>"
        )
        assert repr(StackedLink(frames, code="PANIC")) == (
            "<StackedLink(code='PANIC', frames=2, cause=None)>"
        )

    def test_str_renders_the_whole_chain(self):
        link = MessagedLink("try again", CodedLink("USER"))
        assert str(link) == "[USER] (try again)"
        assert str(CodedLink("USER", ValueError("boom"))) == "[USER] boom"

    def test_links_can_be_raised(self):
        with pytest.raises(Link) as exc:
            raise with_code(None, "PANIC")
        assert code(exc.value) == "PANIC"


class ChargeFailed(Link):
    """Raised when a card cannot be charged."""


@pytest.mark.unit
class TestCausedLinks:
    def test_bare_link(self):
        link = Link()
        assert code(link) == CODE_CRITICAL
        assert message(link) == ""
        assert dev_message(link) == ""
        assert stack_trace(link) == ()
        assert str(link) == "[CRITICAL]"
        assert repr(link) == "<Link(cause=None)>"

    def test_bare_link_over_foreign_error(self):
        leaf = ValueError("boom")
        link = Link(leaf)
        assert cause(link) is leaf
        assert dev_message(link) == "boom"
        assert str(link) == "[CRITICAL] boom"

    def test_subclass_passes_its_cause_on(self):
        error = with_dev_message(ValueError("boom"), "db timeout")
        error = ChargeFailed(with_message(with_code(error, "USER"), "retry"))
        assert error.kind is LinkKind.CAUSED
        assert code(error) == "USER"
        assert message(error) == "retry"
        assert dev_message(error) == "db timeout, boom"
        assert dev_messages(error) == ["db timeout", "boom"]
        assert str(error) == "[USER] db timeout, boom (retry)"

    def test_subclass_can_be_raised_and_caught(self):
        with pytest.raises(Link) as exc:
            raise ChargeFailed(with_code(None, "PANIC"))
        assert code(exc.value) == "PANIC"
        assert stack_trace(exc.value)

    def test_subclass_survives_pickling(self):
        error = ChargeFailed(with_code(ValueError("boom"), "USER"))
        restored = pickle.loads(pickle.dumps(error))
        assert type(restored) is ChargeFailed
        assert str(restored) == "[USER] boom"


@pytest.mark.integration
class TestPickling:
    def test_chain_survives_pickling(self):
        error = with_dev_message(ValueError("boom"), "db timeout")
        error = with_code(error, "USER")
        error = with_message(error, "try again")
        restored = pickle.loads(pickle.dumps(error))
        assert type(restored) is MessagedLink
        assert code(restored) == "USER"
        assert message(restored) == "try again"
        assert dev_messages(restored) == ["db timeout", "boom"]

    def test_frames_survive_pickling(self):
        error = with_message(None, "try again")
        restored = pickle.loads(pickle.dumps(error))
        assert stack_trace(restored) == stack_trace(error)
        assert stack_trace(restored)
