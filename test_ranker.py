#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Test protocol scoring and ranking
"""

import pytest

from ProtocolSearch.catalog.catalog import Catalog
from ProtocolSearch.preprocessing.document import Protocol
from ProtocolSearch.preprocessing.preprocess import tokenize
from ProtocolSearch.ranking.ranker import (
    MAX_RESULTS,
    ProtocolSearchEngine,
    match_scored,
    rank_protocols,
    rank_scored,
    score_protocol,
)


def make_protocol(title, category="Medical", start_page=1, excerpt="", number=""):
    return Protocol(title=title, number=number, category=category,
                    start_page=start_page, end_page=start_page + 1, excerpt=excerpt)


@pytest.fixture
def protocols():
    return [
        make_protocol("Sepsis", "Medical", 61, "suspect sepsis with infection and hypoperfusion"),
        make_protocol("Anaphylaxis", "Medical", 44, "treat anaphylaxis with epinephrine"),
        make_protocol("SVT", "Cardiac", 92, "adenosine for stable svt"),
        make_protocol("Cardiac Arrest", "Cardiac", 80, "cpr and defibrillation"),
        make_protocol("Haemorrhage", "Trauma", 120, "tourniquet for limb haemorrhage"),
        make_protocol("Paediatric Fever", "Pediatric", 151, "signs of sepsis in febrile children"),
        make_protocol("Patient Assessment", "General", 8, "primary survey"),
    ]


def test_title_weighted_three_times():
    protocol = make_protocol("Anaphylaxis", excerpt="treat anaphylaxis with epinephrine")
    assert score_protocol(["anaphylaxis"], protocol) == 4


def test_disjoint_vocabulary_scores_zero():
    protocol = make_protocol("Anaphylaxis", excerpt="treat anaphylaxis with epinephrine")
    assert score_protocol(["tourniquet"], protocol) == 0


def test_empty_query_scores_zero():
    protocol = make_protocol("Anaphylaxis", excerpt="anaphylaxis")
    assert score_protocol([], protocol) == 0


def test_repeated_query_terms_count_each_time():
    protocol = make_protocol("Shock", excerpt="shock")
    assert score_protocol(["shock", "shock"], protocol) == 8


def test_exact_token_matching_only():
    protocol = make_protocol("Anaphylactic reaction", excerpt="anaphylaxis")
    assert score_protocol(["anaphyl"], protocol) == 0
    assert score_protocol(tokenize("ANAPHYLAXIS"), protocol) == 1


def test_missing_excerpt_is_tolerated():
    protocol = Protocol.from_dict({"title": "Sepsis", "category": "Medical", "start_page": 3, "end_page": 4})
    assert score_protocol(["sepsis"], protocol) == 3


def test_ranked_by_score_then_start_page(protocols):
    results = rank_scored(protocols, "sepsis")
    assert [(p.title, s) for p, s in results] == [
        ("Sepsis", 4),
        ("Paediatric Fever", 1),
    ]


def test_non_matching_protocols_excluded(protocols):
    results = rank_protocols(protocols, "tourniquet")
    assert [p.title for p in results] == ["Haemorrhage"]


def test_equal_scores_ordered_by_start_page():
    protocols = [
        make_protocol("Shock late", start_page=30, excerpt="shock"),
        make_protocol("Other", start_page=5, excerpt="nothing here"),
        make_protocol("Shock early", start_page=10, excerpt="shock"),
    ]
    assert [p.title for p in rank_protocols(protocols, "shock")] == ["Shock early", "Shock late"]


def test_empty_query_orders_by_category_then_start_page(protocols):
    results = rank_protocols(protocols, "")
    assert [(p.category, p.start_page) for p in results] == [
        ("Cardiac", 80),
        ("Cardiac", 92),
        ("General", 8),
        ("Medical", 44),
        ("Medical", 61),
        ("Pediatric", 151),
        ("Trauma", 120),
    ]


def test_stop_word_query_treated_as_empty(protocols):
    assert rank_protocols(protocols, "the a of") == rank_protocols(protocols, "")


def test_empty_query_scores_are_zero(protocols):
    assert all(score == 0 for _, score in rank_scored(protocols, ""))


def test_category_filter_on_both_paths(protocols):
    for query in ("", "sepsis cpr adenosine"):
        results = rank_protocols(protocols, query, {"Cardiac"})
        assert results
        assert all(p.category == "Cardiac" for p in results)


def test_category_filter_is_case_sensitive(protocols):
    assert rank_protocols(protocols, "", {"cardiac"}) == []


def test_empty_filter_keeps_everything(protocols):
    assert len(rank_protocols(protocols, "", set())) == len(protocols)
    assert len(rank_protocols(protocols, "", None)) == len(protocols)


def test_result_cap():
    protocols = [make_protocol(f"Shock {i}", start_page=i, excerpt="shock") for i in range(1, 121)]
    assert len(rank_protocols(protocols, "")) == MAX_RESULTS
    assert len(rank_protocols(protocols, "shock")) == MAX_RESULTS
    assert len(rank_protocols(protocols, "shock", limit=500)) == MAX_RESULTS
    assert len(rank_protocols(protocols, "shock", limit=5)) == 5


def test_ranking_is_deterministic(protocols):
    first = rank_protocols(protocols, "sepsis cardiac")
    for _ in range(5):
        assert rank_protocols(protocols, "sepsis cardiac") == first


def test_equal_keys_keep_catalog_order():
    protocols = [
        make_protocol("First", category="Trauma", start_page=5),
        make_protocol("Second", category="Trauma", start_page=5),
    ]
    assert [p.title for p in rank_protocols(protocols, "")] == ["First", "Second"]


def test_engine_on_empty_catalog():
    engine = ProtocolSearchEngine(Catalog.empty())
    assert engine.search("sepsis") == []
    assert engine.search("") == []


def test_engine_search(protocols):
    engine = ProtocolSearchEngine(Catalog(protocols, "guidelines.pdf", 200))
    results = engine.search("sepsis", categories={"Pediatric"})
    assert [(p.title, s) for p, s in results] == [("Paediatric Fever", 1)]
    assert engine.debug_query("The Sepsis Protocol") == ["sepsis", "protocol"]


def test_match_scored_is_uncapped():
    protocols = [make_protocol(f"Shock {i}", start_page=i, excerpt="shock") for i in range(1, 61)]
    matches = match_scored(protocols, "shock")

    assert len(matches) == 60
    assert [p for p, _ in matches[:MAX_RESULTS]] == rank_protocols(protocols, "shock")


def test_engine_count_matches():
    protocols = [make_protocol(f"Shock {i}", start_page=i, excerpt="shock") for i in range(1, 61)]
    engine = ProtocolSearchEngine(Catalog(protocols))

    assert engine.count_matches("shock") == 60
    assert len(engine.search("shock")) == MAX_RESULTS
    assert engine.count_matches("tourniquet") == 0
