import pytest

from nearby.core.errors import ResponseError
from nearby.services.fetchers.ine_crime import fetch_crimes, match_crimes, normalize_candidates

ENTRIES = [
    {"geodsg": "Lisboa", "dim_3_t": "Furto", "valor": "1520"},
    {"geodsg": "Lisboa", "dim_3_t": "Roubo", "valor": "310,5"},
    {"geodsg": "Sintra", "dim_3_t": "Furto", "valor": "640"},
    {"geodsg": "Loures", "dim_3_t": "Furto", "valor": ""},
]


def _feed(entries, year="2022"):
    return [{"IndicadorCod": "0008074", "Dados": {year: entries}}]


class TestNormalizeCandidates:
    def test_splits_trims_and_lowercases(self):
        names = ["Santo António, Lisboa", " SINTRA ", "", "lisboa"]
        assert normalize_candidates(names) == ["santo antónio", "lisboa", "sintra"]


class TestMatchCrimes:
    def test_first_matching_candidate_wins(self):
        records = match_crimes(ENTRIES, ["Sintra", "Lisboa"])
        assert [(r.city, r.crime_type) for r in records] == [("Sintra", "Furto")]

    def test_all_entries_of_the_winning_city(self):
        records = match_crimes(ENTRIES, ["Avenida da Liberdade", "Lisboa", "Sintra"])
        assert [r.crime_type for r in records] == ["Furto", "Roubo"]
        assert records[1].value == 310.5

    def test_empty_value_defaults_to_zero(self):
        records = match_crimes(ENTRIES, ["Loures"])
        assert records[0].value == 0.0

    def test_no_match_is_empty(self):
        assert match_crimes(ENTRIES, ["Porto"]) == []
        assert match_crimes(ENTRIES, []) == []


class TestFetchCrimes:
    def test_reads_configured_year(self, upstream, run):
        upstream.reply("crime", _feed(ENTRIES) + [{"Dados": {"2021": [ENTRIES[2]]}}])
        records = run(lambda client: fetch_crimes(client, ["Lisboa"]))

        assert len(records) == 2
        params = upstream.calls("crime")[0].url.params
        assert params["varcd"] == "0008074"
        assert params["Dim1"] == "S7A2022"
        assert params["op"] == "2"

    def test_other_years_do_not_match(self, upstream, run):
        upstream.reply("crime", _feed(ENTRIES, year="2019"))
        assert run(lambda client: fetch_crimes(client, ["Lisboa"])) == []

    def test_non_list_feed(self, upstream, run):
        upstream.reply("crime", {"Sucesso": {"Falso": []}})
        with pytest.raises(ResponseError):
            run(lambda client: fetch_crimes(client, ["Lisboa"]))
