"""
Test suite for the populate mini-language parser.

Covers prefix merging, select placement, ordering, overwrite semantics and
malformed input pass-through.

System role: Verification of populate path resolution
"""

from datalayer.core.populate import PopulateSpec, parse_populate


class TestParsePopulateBasics:
    """Test suite for simple populate strings."""

    def test_empty_string_should_yield_no_specs(self) -> None:
        """Test empty input means no eager loading."""
        assert parse_populate("") == []

    def test_none_and_blank_should_yield_no_specs(self) -> None:
        """Test None and whitespace-only input are treated as empty."""
        assert parse_populate(None) == []
        assert parse_populate("   ") == []

    def test_single_path_without_select(self) -> None:
        """Test a bare relation name becomes one node with no select."""
        assert parse_populate("author") == [PopulateSpec(path="author")]

    def test_select_applies_to_last_segment_only(self) -> None:
        """Test the select lands on the deepest node of the expression."""
        # Act
        specs = parse_populate("author.profile:name,bio")

        # Assert
        assert specs == [
            PopulateSpec(
                path="author",
                select=None,
                children=[PopulateSpec(path="profile", select="name,bio")],
            )
        ]

    def test_fields_should_split_select_on_commas(self) -> None:
        """Test PopulateSpec.fields lists the selected columns."""
        spec = PopulateSpec(path="user", select="handle, email,")
        assert spec.fields == ["handle", "email"]
        assert PopulateSpec(path="user").fields == []


class TestParsePopulateMerging:
    """Test suite for merging expressions that share a prefix."""

    def test_shared_prefix_should_merge_into_one_node(self) -> None:
        """Test 'a.b:x a.c:y' yields one 'a' with children b and c."""
        # Act
        specs = parse_populate("a.b:x a.c:y")

        # Assert
        assert len(specs) == 1
        assert specs[0].path == "a"
        assert specs[0].select is None
        assert specs[0].children == [
            PopulateSpec(path="b", select="x"),
            PopulateSpec(path="c", select="y"),
        ]

    def test_independent_paths_keep_first_seen_order(self) -> None:
        """Test top-level nodes appear in the order they were first named."""
        specs = parse_populate("comments.user:handle author.profile:name,bio")

        assert [spec.path for spec in specs] == ["comments", "author"]
        assert specs[0].children == [PopulateSpec(path="user", select="handle")]
        assert specs[1].children == [PopulateSpec(path="profile", select="name,bio")]

    def test_deep_paths_merge_at_every_level(self) -> None:
        """Test merging continues below the first level."""
        specs = parse_populate("a.b.c a.b.d:z")

        assert len(specs) == 1
        b_node = specs[0].children[0]
        assert b_node.path == "b"
        assert b_node.children == [
            PopulateSpec(path="c"),
            PopulateSpec(path="d", select="z"),
        ]

    def test_conflicting_select_last_occurrence_wins(self) -> None:
        """Test the last expression ending on a node sets its select."""
        specs = parse_populate("author:name author:email")

        assert specs == [PopulateSpec(path="author", select="email")]

    def test_naming_parent_after_child_keeps_children(self) -> None:
        """Test a later expression ending on a parent does not drop its subtree."""
        specs = parse_populate("author.profile:bio author:name")

        assert specs == [
            PopulateSpec(
                path="author",
                select="name",
                children=[PopulateSpec(path="profile", select="bio")],
            )
        ]

    def test_intermediate_mention_does_not_reset_select(self) -> None:
        """Test passing through a node on the way deeper leaves its select alone."""
        specs = parse_populate("author:name author.profile")

        assert specs[0].select == "name"
        assert specs[0].children == [PopulateSpec(path="profile")]


class TestParsePopulateMalformed:
    """Test suite for malformed input, which is passed through uninterpreted."""

    def test_trailing_dot_should_yield_empty_segment(self) -> None:
        """Test 'author.' produces a child with an empty path."""
        specs = parse_populate("author.")

        assert specs == [PopulateSpec(path="author", children=[PopulateSpec(path="")])]

    def test_trailing_colon_should_yield_no_select(self) -> None:
        """Test an empty select is treated as no select."""
        assert parse_populate("author:") == [PopulateSpec(path="author", select=None)]

    def test_only_first_colon_splits(self) -> None:
        """Test everything after the first colon is the select token."""
        assert parse_populate("author:a:b") == [PopulateSpec(path="author", select="a:b")]

    def test_results_are_fresh_per_call(self) -> None:
        """Test parsing twice returns independent trees."""
        first = parse_populate("a.b")
        second = parse_populate("a.b")

        first[0].children.append(PopulateSpec(path="extra"))

        assert second == [PopulateSpec(path="a", children=[PopulateSpec(path="b")])]
