"""Tests for the xcmigrate diff, fingerprint and suppression stages."""

import pytest
from xcmigrate import (
    Differ,
    Entity,
    Field,
    FingerprintScheme,
    ProblemKind,
    Report,
    SuppressionStore,
    Version,
    apply_fingerprints,
    diff,
    filter_reports,
    fingerprint,
    load_store,
)
from xcmigrate.models import ChangedAttribute, MissingEntity, MissingField


def make_field(name, **attributes):
    return Field(name=name, attributes={"name": name, **attributes})


def make_version(number, *entities):
    return Version(number=number, entities=list(entities))


def user_entity(*fields):
    return Entity(name="User", fields=list(fields))


class TestDiffEngine:
    """Test adjacent-version diffing."""

    def setup_method(self):
        self.differ = Differ()

    def test_identical_versions(self):
        """Test that a version diffed against a copy of itself has no problems."""
        entity = user_entity(make_field("name", attributeType="String"))
        old = make_version(1, entity)
        new = make_version(2, user_entity(make_field("name", attributeType="String")))

        report = self.differ.diff_versions(old, new)
        assert report.from_version == 1
        assert report.to_version == 2
        assert report.problems == []

    def test_missing_entity(self):
        """Test that a removed entity yields one MissingEntity and no field problems."""
        old = make_version(
            1,
            user_entity(make_field("name")),
            Entity(name="Post", fields=[make_field("title"), make_field("body")]),
        )
        new = make_version(2, user_entity(make_field("name")))

        report = self.differ.diff_versions(old, new)
        assert len(report.problems) == 1
        problem = report.problems[0]
        assert isinstance(problem, MissingEntity)
        assert problem.entity_name == "Post"

    def test_missing_field(self):
        """Test that a removed field is reported against its entity."""
        old = make_version(2, user_entity(make_field("name"), make_field("age")))
        new = make_version(3, user_entity(make_field("name")))

        report = self.differ.diff_versions(old, new)
        assert len(report.problems) == 1
        problem = report.problems[0]
        assert problem.kind == ProblemKind.MISSING_FIELD
        assert problem.entity_name == "User"
        assert problem.field_name == "age"

    def test_changed_attribute(self):
        """Test that a changed attribute value is reported with both values."""
        old = make_version(2, user_entity(make_field("name", type="string")))
        new = make_version(3, user_entity(make_field("name", type="text")))

        report = self.differ.diff_versions(old, new)
        assert len(report.problems) == 1
        problem = report.problems[0]
        assert isinstance(problem, ChangedAttribute)
        assert problem.field_name == "name"
        assert problem.attribute == "type"
        assert problem.old_value == "string"
        assert problem.new_value == "text"

    def test_removed_attribute_is_changed(self):
        """Test that an attribute missing on the new side compares as absent."""
        old = make_version(1, user_entity(make_field("age", optional="YES")))
        new = make_version(2, user_entity(make_field("age")))

        report = self.differ.diff_versions(old, new)
        assert len(report.problems) == 1
        assert report.problems[0].old_value == "YES"
        assert report.problems[0].new_value is None

    def test_absent_differs_from_empty_string(self):
        """Test that an empty value on the old side differs from an absent one."""
        old = make_version(1, user_entity(make_field("age", defaultValueString="")))
        new = make_version(2, user_entity(make_field("age")))

        report = self.differ.diff_versions(old, new)
        assert len(report.problems) == 1
        assert report.problems[0].old_value == ""
        assert report.problems[0].new_value is None

    def test_additive_changes_are_silent(self):
        """Test that new entities, fields and attribute keys are never reported."""
        old = make_version(1, user_entity(make_field("name")))
        new = make_version(
            2,
            user_entity(make_field("name", indexed="YES"), make_field("email")),
            Entity(name="Post", fields=[make_field("title")]),
        )

        report = self.differ.diff_versions(old, new)
        assert report.problems == []

    def test_matching_is_case_sensitive(self):
        """Test that names must match exactly."""
        old = make_version(1, user_entity(make_field("name")))
        new = make_version(2, Entity(name="user", fields=[make_field("name")]))

        report = self.differ.diff_versions(old, new)
        assert [p.kind for p in report.problems] == [ProblemKind.MISSING_ENTITY]

    def test_no_short_circuit(self):
        """Test that one entity can contribute field and attribute problems together."""
        old = make_version(1, user_entity(
            make_field("name", type="string", optional="NO"),
            make_field("age"),
            make_field("email"),
        ))
        new = make_version(2, user_entity(
            make_field("name", type="text", optional="YES"),
        ))

        report = self.differ.diff_versions(old, new)
        kinds = [p.kind for p in report.problems]
        assert kinds == [
            ProblemKind.CHANGED_ATTRIBUTE,
            ProblemKind.CHANGED_ATTRIBUTE,
            ProblemKind.MISSING_FIELD,
            ProblemKind.MISSING_FIELD,
        ]

    def test_order_follows_old_version(self):
        """Test that problems follow the old version's stored order."""
        old = make_version(
            1,
            Entity(name="Zebra"),
            Entity(name="Apple"),
            Entity(name="Mango"),
        )
        new = make_version(2)

        report = self.differ.diff_versions(old, new)
        assert [p.entity_name for p in report.problems] == ["Zebra", "Apple", "Mango"]

    def test_first_match_wins(self):
        """Test that duplicate names resolve to the first occurrence."""
        old = make_version(1, user_entity(make_field("name", type="string")))
        new = make_version(
            2,
            user_entity(make_field("name", type="string")),
            user_entity(make_field("name", type="text")),
        )

        report = self.differ.diff_versions(old, new)
        assert report.problems == []


class TestVersionChain:
    """Test diffing of complete version chains."""

    def test_adjacent_pairs_only(self):
        """Test that [1, 2, 3] yields exactly (1->2) and (2->3)."""
        versions = [
            make_version(1, user_entity(make_field("name"), make_field("age"))),
            make_version(2, user_entity(make_field("name"))),
            make_version(3, user_entity(make_field("name"))),
        ]

        reports = diff(versions)
        assert [(r.from_version, r.to_version) for r in reports] == [(1, 2), (2, 3)]
        assert len(reports[0].problems) == 1
        assert reports[1].problems == []

    def test_removal_is_not_repeated(self):
        """Test that a version is compared only with its direct predecessor."""
        versions = [
            make_version(1, user_entity(make_field("age"))),
            make_version(2, user_entity()),
            make_version(3, user_entity()),
        ]

        reports = diff(versions)
        assert sum(len(r.problems) for r in reports) == 1

    @pytest.mark.parametrize("count", [0, 1])
    def test_short_chain(self, count):
        """Test that fewer than two versions yield no reports."""
        versions = [make_version(n + 1) for n in range(count)]
        assert diff(versions) == []


class TestFingerprint:
    """Test fingerprint keys."""

    def test_missing_entity_key(self):
        report = Report(from_version=4, to_version=5)
        assert fingerprint(report, MissingEntity(entity_name="Post")) == \
            "solved.5.entity.Post.missing"

    def test_missing_field_key(self):
        report = Report(from_version=2, to_version=3)
        problem = MissingField(entity_name="User", field_name="age")
        assert fingerprint(report, problem) == "solved.3.field.User.age.missing"

    def test_changed_attribute_key(self):
        report = Report(from_version=2, to_version=3)
        problem = ChangedAttribute(
            entity_name="User", field_name="name", attribute="type",
            old_value="string", new_value="text",
        )
        assert fingerprint(report, problem) == "solved.3.field.User.name.changed"

    def test_per_attribute_scheme(self):
        """Test that the per-attribute scheme keeps attribute changes apart."""
        report = Report(from_version=2, to_version=3)
        problem = ChangedAttribute(
            entity_name="User", field_name="name", attribute="type",
            old_value="string", new_value="text",
        )
        key = fingerprint(report, problem, FingerprintScheme.PER_ATTRIBUTE)
        assert key == "solved.3.field.User.name.type.changed"

    def test_deterministic(self):
        """Test that two runs over the same versions produce the same keys."""
        def run():
            versions = [
                make_version(1, user_entity(make_field("name", type="a"), make_field("age")),
                             Entity(name="Post")),
                make_version(2, user_entity(make_field("name", type="b"))),
            ]
            reports = diff(versions)
            apply_fingerprints(reports)
            return [p.key for r in reports for p in r.problems]

        first = run()
        assert first == run()
        assert first == [
            "solved.2.field.User.name.changed",
            "solved.2.field.User.age.missing",
            "solved.2.entity.Post.missing",
        ]


class TestSuppression:
    """Test accepted-key filtering."""

    def setup_method(self):
        versions = [
            make_version(2, user_entity(make_field("name", type="string"), make_field("age"))),
            make_version(3, user_entity(make_field("name", type="text"))),
        ]
        self.reports = diff(versions)
        apply_fingerprints(self.reports)

    def _resolved(self):
        return {p.key: p.resolved for p in self.reports[0].problems}

    def test_accepted_key_resolves(self):
        filter_reports(self.reports, {"solved.3.field.User.age.missing"})
        assert self._resolved() == {
            "solved.3.field.User.name.changed": False,
            "solved.3.field.User.age.missing": True,
        }
        assert not self.reports[0].is_resolved

    def test_toggling_key(self):
        """Test that removing a key unresolves only its problem."""
        all_keys = {p.key for p in self.reports[0].problems}
        filter_reports(self.reports, all_keys)
        assert self.reports[0].is_resolved

        filter_reports(self.reports, all_keys - {"solved.3.field.User.age.missing"})
        assert self._resolved() == {
            "solved.3.field.User.name.changed": True,
            "solved.3.field.User.age.missing": False,
        }

    def test_shared_key_collision(self):
        """Test that two attribute changes on one field share one legacy key."""
        versions = [
            make_version(1, user_entity(make_field("name", type="string", optional="NO"))),
            make_version(2, user_entity(make_field("name", type="text", optional="YES"))),
        ]
        reports = diff(versions)
        apply_fingerprints(reports)
        filter_reports(reports, {"solved.2.field.User.name.changed"})

        assert len(reports[0].problems) == 2
        assert all(p.resolved for p in reports[0].problems)

    def test_missing_store_warns(self, tmp_path):
        """Test that a missing solved file yields an empty store and a warning."""
        store, warnings = load_store(tmp_path / "Model.solved")
        store.apply(self.reports)

        assert store.accepted == frozenset()
        assert len(warnings) == 1
        assert warnings[0].code == "SOLVED_FILE_MISSING"
        assert not any(p.resolved for p in self.reports[0].problems)

    def test_store_from_file(self, tmp_path):
        """Test that keys are read one per line."""
        solved = tmp_path / "Model.solved"
        solved.write_text(
            "solved.3.field.User.age.missing\nsolved.3.field.User.name.changed\n"
        )
        store, warnings = load_store(solved)
        store.apply(self.reports)

        assert warnings == []
        assert self.reports[0].is_resolved

    def test_keys_are_not_trimmed(self):
        """Test that keys match verbatim, including surrounding whitespace."""
        store = SuppressionStore.from_text(" solved.3.field.User.age.missing\n")
        assert not store.is_accepted("solved.3.field.User.age.missing")
        assert store.is_accepted(" solved.3.field.User.age.missing")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
