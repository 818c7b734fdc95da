"""
Tests for unsubscribe form selection and field filling.
"""

import pytest

from src.email_processor.unsubscribe import UnsubscribeFormParser, HtmlDocument
from src.email_processor.unsubscribe.exceptions import NoFormFoundError


PAGE_URL = 'https://lists.example.com/manage/unsub?id=42'


@pytest.fixture
def parser():
    return UnsubscribeFormParser(placeholder_email='user@example.com')


class TestFormSelection:
    """Test which form on a page gets picked."""

    def test_first_matching_form_wins(self, parser):
        page = """
        <form action="/search"><input name="q"></form>
        <form action="/unsubscribe" method="post"><input type="submit" value="Unsubscribe"></form>
        <form action="/confirm" method="post"><input type="submit" value="Confirm"></form>
        """

        form = parser.find_unsubscribe_form(page, PAGE_URL)

        assert form.action == 'https://lists.example.com/unsubscribe'

    def test_confirmation_form_qualifies(self, parser):
        page = '<form action="done"><button>Bevestigen</button></form>'

        form = parser.find_unsubscribe_form(page, PAGE_URL)

        assert form.action == 'https://lists.example.com/manage/done'

    def test_no_matching_form_raises(self, parser):
        page = '<form action="/search"><input name="q"><input type="submit" value="Go"></form>'

        with pytest.raises(NoFormFoundError) as exc_info:
            parser.find_unsubscribe_form(page, PAGE_URL)

        assert exc_info.value.forms_seen == 1
        assert 'no suitable form found' in str(exc_info.value)

    def test_page_without_forms_raises(self, parser):
        with pytest.raises(NoFormFoundError):
            parser.find_unsubscribe_form('<p>You have been unsubscribed</p>', PAGE_URL)


class TestFormAttributes:
    """Test action and method resolution."""

    def test_missing_action_defaults_to_original_url(self, parser):
        page = '<form method="post"><input type="submit" value="Unsubscribe"></form>'

        form = parser.find_unsubscribe_form(page, PAGE_URL, original_url='https://e.example.com/u')

        assert form.action == 'https://e.example.com/u'

    def test_absolute_action_kept(self, parser):
        page = '<form action="https://other.example.net/optout"><input type="submit"></form>'

        form = parser.find_unsubscribe_form(page, PAGE_URL)

        assert form.action == 'https://other.example.net/optout'

    def test_method_defaults_to_post(self, parser):
        page = '<form action="/u"><input type="submit" value="Unsubscribe"></form>'

        assert parser.find_unsubscribe_form(page, PAGE_URL).method == 'POST'

    def test_get_method_respected(self, parser):
        page = '<form action="/u" method="get"><input type="submit" value="Unsubscribe"></form>'

        assert parser.find_unsubscribe_form(page, PAGE_URL).method == 'GET'


class TestFieldFilling:
    """Test the field synthesis policy."""

    def test_hidden_fields_preserved_verbatim(self, parser):
        page = """
        <form action="/unsubscribe" method="post">
            <input type="hidden" name="csrf" value="abc123">
            <input type="hidden" name="tracking_id" value="x=1&amp;y=2">
            <input type="submit" value="Unsubscribe">
        </form>
        """

        fields = parser.find_unsubscribe_form(page, PAGE_URL).fields

        assert fields['csrf'] == 'abc123'
        assert fields['tracking_id'] == 'x=1&y=2'

    def test_hidden_email_field_not_replaced(self, parser):
        page = """
        <form action="/unsubscribe">
            <input type="hidden" name="email" value="real.person@mail.example">
        </form>
        """

        fields = parser.find_unsubscribe_form(page, PAGE_URL).fields

        assert fields['email'] == 'real.person@mail.example'

    def test_submit_and_button_values(self, parser):
        page = """
        <form action="/unsubscribe">
            <input type="submit" name="go" value="Yes, remove me">
            <input type="button" name="alt">
        </form>
        """

        fields = parser.find_unsubscribe_form(page, PAGE_URL).fields

        assert fields['go'] == 'Yes, remove me'
        assert fields['alt'] == 'Unsubscribe'

    def test_email_and_confirm_fields_synthesized(self, parser):
        page = """
        <form action="/unsubscribe">
            <input type="text" name="EmailAddress">
            <input type="checkbox" name="confirm_removal">
            <input type="text" name="reason" value="too many">
            <input type="text" name="comment">
            <input type="text" value="no name">
        </form>
        """

        fields = parser.find_unsubscribe_form(page, PAGE_URL).fields

        assert fields == {
            'EmailAddress': 'user@example.com',
            'confirm_removal': '1',
            'reason': 'too many',
            'comment': ''
        }

    def test_custom_placeholder_email(self):
        parser = UnsubscribeFormParser(placeholder_email='me@mine.example')
        page = '<form action="/u"><input name="email"><input type="submit" value="Unsubscribe"></form>'

        fields = parser.find_unsubscribe_form(page, PAGE_URL).fields

        assert fields['email'] == 'me@mine.example'


class TestHtmlDocument:

    def test_find_elements_and_attributes(self):
        document = HtmlDocument('<div class="a b"><input NAME="x" value="1"></div>')

        inputs = document.find_elements('input')
        divs = document.find_elements('div')

        assert len(inputs) == 1
        assert inputs[0].get_attribute('name') == 'x'
        assert inputs[0].get_attribute('missing') is None
        assert divs[0].get_attribute('class') == 'a b'
