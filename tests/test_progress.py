"""Test progress bar counters"""

from mvfinder.core.progress import AssetProgressBar, EnrichmentProgressBar, SearchProgressBar


class TestSearchProgressBar:
    """Test SearchProgressBar"""

    def test_counts_by_status(self):
        bar = SearchProgressBar(total=4)
        for status in ("found", "found", "not_found", "videos_unavailable"):
            bar.update(status)

        assert bar.completed == 4
        assert (bar.found, bar.not_found, bar.failed) == (2, 1, 1)
        assert "✓ 2" in bar._get_status_text()
        assert "⚠ 1" in bar._get_status_text()

    def test_context_manager(self):
        with SearchProgressBar(total=1) as bar:
            bar.update("found")
        assert not bar._started


class TestEnrichmentProgressBar:
    """Test EnrichmentProgressBar"""

    def test_on_progress_takes_running_totals(self):
        bar = EnrichmentProgressBar(total=3)
        bar.on_progress(2, 3, 1, 1)
        assert (bar.completed, bar.enriched, bar.failed) == (2, 1, 1)

    def test_update(self):
        bar = EnrichmentProgressBar(total=2)
        bar.update(True)
        bar.update(False)
        assert (bar.enriched, bar.failed) == (1, 1)


class TestAssetProgressBar:
    """Test AssetProgressBar"""

    def test_skipped_shown_only_when_present(self):
        bar = AssetProgressBar(total=3)
        bar.update("downloaded")
        assert "⊘" not in bar._get_status_text()

        bar.update("skipped")
        bar.update("failed")
        assert (bar.downloaded, bar.skipped, bar.failed) == (1, 1, 1)
        assert "⊘ 1" in bar._get_status_text()
