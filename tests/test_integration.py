"""End-to-end tests driving the app through BlogsClient."""

import pytest

from blogdesk.utils.http_client import ValidationFailed


class TestListRoundTrip:
    """Test cases for filter state surviving navigation and writes."""

    def test_search_then_sort_keeps_search(self, api_client, make_blog):
        make_blog(title='foo two', content='x')
        make_blog(title='foo one', content='x')
        make_blog(title='bar', content='x')

        page = api_client.search('foo')
        assert page.total == 2
        assert page.filters.search == 'foo'

        page = api_client.sort_by('title')
        assert page.filters.search == 'foo'
        assert page.filters.direction == 'asc'
        assert [b['title'] for b in page.blogs] == ['foo one', 'foo two']

        page = api_client.sort_by('title')
        assert page.filters.direction == 'desc'
        assert [b['title'] for b in page.blogs] == ['foo two', 'foo one']

    def test_paging_then_per_page_resets_page(self, api_client, many_blogs):
        page = api_client.go_to_page(2)
        assert page.current_page == 2
        assert page.from_ == 11

        page = api_client.set_per_page(5)
        assert page.current_page == 1
        assert page.last_page == 3

    def test_delete_decrements_total(self, api_client, many_blogs):
        before = api_client.load().total
        target = api_client.page.blogs[0]['id']

        api_client.request_delete(target)
        assert api_client.confirm_delete() is True

        page = api_client.load()
        assert page.total == before - 1
        assert target not in [b['id'] for b in page.blogs]
        assert page.flash == []

    def test_create_then_update(self, api_client, fetch_blog):
        api_client.load()
        created = api_client.create('Draft', 'First body')
        updated = api_client.update(created['id'], 'Final', 'Second body')

        assert updated['id'] == created['id']
        assert updated['created_at'] == created['created_at']
        assert fetch_blog(created['id']).title == 'Final'

        page = api_client.load()
        assert page.total == 1
        assert page.blogs[0]['title'] == 'Final'

    def test_validation_errors_surface(self, api_client):
        with pytest.raises(ValidationFailed) as exc:
            api_client.create('', '')
        assert set(exc.value.errors) == {'title', 'content'}
        assert api_client.load().total == 0
