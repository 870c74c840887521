"""
Tests for client / quote visibility rules.
"""

import uuid
from types import SimpleNamespace

from app.services.scoping import client_scope_query, filter_client_infos, quote_scope_query


def client(agent_id=None, user_id=None, name="Acme"):
    return SimpleNamespace(id=uuid.uuid4(), agent_id=agent_id, user_id=user_id, company_name=name)


class TestFilterClientInfos:

    def test_admin_sees_everything(self, admin_profile):
        rows = [client(agent_id=uuid.uuid4()), client(), client(user_id=uuid.uuid4())]
        assert filter_client_infos(admin_profile, rows) == rows

    def test_associated_user_sees_agent_clients(self, profile_factory):
        agent_id = uuid.uuid4()
        profile = profile_factory(role="user", associated_agent_id=agent_id)
        mine = client(agent_id=agent_id)
        rows = [mine, client(agent_id=uuid.uuid4()), client(user_id=profile.id)]
        assert filter_client_infos(profile, rows) == [mine]

    def test_agent_sees_assigned_clients(self, agent_profile):
        own_agent_id = uuid.uuid4()
        by_profile = client(agent_id=agent_profile.id)
        by_agent_row = client(agent_id=own_agent_id)
        rows = [by_profile, by_agent_row, client(agent_id=uuid.uuid4()), client(user_id=agent_profile.id)]
        assert filter_client_infos(agent_profile, rows, own_agent_id) == [by_profile, by_agent_row]

    def test_falls_back_to_created_clients(self, user_profile):
        created = client(user_id=user_profile.id)
        rows = [created, client(agent_id=uuid.uuid4()), client(user_id=uuid.uuid4())]
        assert filter_client_infos(user_profile, rows) == [created]

    def test_nothing_visible(self, user_profile):
        assert filter_client_infos(user_profile, [client(user_id=uuid.uuid4())]) == []


class TestScopeQueries:

    def test_admin_queries_are_unfiltered(self, admin_profile):
        assert client_scope_query(admin_profile).whereclause is None
        assert quote_scope_query(admin_profile).whereclause is None

    def test_agent_client_query_filters_on_agent_and_creator(self, agent_profile):
        sql = str(client_scope_query(agent_profile, uuid.uuid4()).whereclause)
        assert "client_info.agent_id IN" in sql
        assert "client_info.user_id" in sql

    def test_associated_user_client_query(self, profile_factory):
        profile = profile_factory(role="user", associated_agent_id=uuid.uuid4())
        sql = str(client_scope_query(profile).whereclause)
        assert "client_info.agent_id =" in sql
        assert "client_info.user_id" not in sql

    def test_agent_quote_query(self, agent_profile):
        sql = str(quote_scope_query(agent_profile, uuid.uuid4()).whereclause)
        assert "quotes.client_id" in sql
        assert "quotes.user_id" in sql

    def test_plain_user_sees_own_quotes(self, user_profile):
        sql = str(quote_scope_query(user_profile).whereclause)
        assert "quotes.user_id" in sql
        assert "quotes.client_id =" not in sql
