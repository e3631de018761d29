"""
Tests for the Analysis Coordinator
Confidence gating, single-flight behaviour and end-to-end scenarios.
"""

import json
import threading
import pytest

from conftest import GOOD_POSE, StubExtractor, make_features, make_keypoints


class TestEndToEnd:

    def test_ideal_features_perfect_result(self, good_keypoints, ideal_features):
        """Ideal feature values score 100 with the top summary and no corrections"""
        from core.analyzer import AnalysisCoordinator

        coordinator = AnalysisCoordinator(extractor=StubExtractor(ideal_features))
        result = coordinator.analyze(good_keypoints, 0.9)

        assert result is not None
        assert result.overall_score == 100.0
        assert result.summary_feedback == "Perfect form! MJ would be proud!"
        assert result.detailed_feedback == ("Great form!",)
        assert result.short_feedback == "Great form!"
        assert result.grade == "excellent"

    def test_bent_elbow_single_cue(self, good_keypoints):
        """Elbow at 60 degrees triggers exactly one elbow cue and costs points"""
        from core.analyzer import AnalysisCoordinator

        coordinator = AnalysisCoordinator(extractor=StubExtractor(make_features(elbow_angle=60.0)))
        result = coordinator.analyze(good_keypoints, 0.9)

        assert result.detailed_feedback == ("Elbow: Form a 90° angle with your arm",)
        assert result.short_feedback == "Elbow too tight"
        assert result.overall_score < 100.0
        assert result.overall_score == pytest.approx(90.0)

    def test_low_confidence_is_absent(self, good_keypoints, ideal_features):
        from core.analyzer import AnalysisCoordinator, AnalysisStatus

        extractor = StubExtractor(ideal_features)
        coordinator = AnalysisCoordinator(extractor=extractor)
        outcome = coordinator.evaluate(good_keypoints, 0.3)

        assert outcome.status is AnalysisStatus.LOW_CONFIDENCE
        assert outcome.result is None
        assert extractor.calls == 0

    def test_missing_knee_is_absent(self):
        from core.analyzer import AnalysisCoordinator, AnalysisStatus

        outcome = AnalysisCoordinator().evaluate(make_keypoints(drop=["left_knee"]), 0.9)

        assert outcome.status is AnalysisStatus.INSUFFICIENT_KEYPOINTS
        assert outcome.result is None

    def test_real_keypoints(self, good_keypoints):
        """Full pipeline on constructed keypoints"""
        from core.analyzer import AnalysisCoordinator

        result = AnalysisCoordinator().analyze(good_keypoints)

        assert result.features.elbow_angle == pytest.approx(90.0)
        # Wrist sub-score is 0 because the wrist angle mirrors the 90 degree elbow
        assert result.overall_score == pytest.approx(500.0 / 6.0)
        assert result.summary_feedback == "Great technique! Keep it up!"
        assert result.detailed_feedback == ("Great form!",)
        assert result.confidence == 0.9
        assert result.confidence_level == "high"
        assert len(result.feature_scores) == 6

    def test_result_to_dict(self, good_keypoints):
        from core.analyzer import AnalysisCoordinator

        data = AnalysisCoordinator().analyze(good_keypoints).to_dict()

        assert data["overall_score"] == pytest.approx(83.3)
        assert data["features"]["release_point"]["x"] == pytest.approx(0.512)
        assert data["detailed_feedback"] == ["Great form!"]
        assert {s["name"] for s in data["feature_scores"]} >= {"elbow_angle", "follow_through"}

    def test_overflowing_keypoints_give_json_safe_result(self):
        from core.analyzer import AnalysisCoordinator

        points = {**GOOD_POSE, "left_elbow": (1e308, 1e308), "left_wrist": (-1e308, -1e308)}
        result = AnalysisCoordinator().analyze(make_keypoints(points))

        assert 0.0 <= result.overall_score <= 100.0
        json.dumps(result.to_dict(), allow_nan=False)


class TestConfidenceGate:

    def test_threshold_is_inclusive(self, good_keypoints, ideal_features):
        from core.analyzer import AnalysisCoordinator

        coordinator = AnalysisCoordinator(extractor=StubExtractor(ideal_features))

        assert coordinator.analyze(good_keypoints, 0.5) is not None
        assert coordinator.analyze(good_keypoints, 0.4999) is None

    def test_defaults_to_keypoint_set_confidence(self, ideal_features):
        from core.analyzer import AnalysisCoordinator

        coordinator = AnalysisCoordinator(extractor=StubExtractor(ideal_features))

        assert coordinator.analyze(make_keypoints(confidence=0.2)) is None
        assert coordinator.analyze(make_keypoints(confidence=0.8)) is not None

    @pytest.mark.parametrize("confidence,level", [(0.95, "high"), (0.8, "high"), (0.7, "medium"), (0.55, "low")])
    def test_confidence_levels(self, confidence, level):
        from core.analyzer import AnalysisCoordinator

        assert AnalysisCoordinator().confidence_level(confidence) == level


class TestSingleFlight:

    def test_reentrant_call_is_rejected(self, good_keypoints, ideal_features):
        """A request arriving while an analysis is in flight gets BUSY without extraction"""
        from core.analyzer import AnalysisCoordinator, AnalysisStatus

        nested = []
        extractor = StubExtractor(ideal_features)
        coordinator = AnalysisCoordinator(extractor=extractor)
        extractor.on_extract = lambda: nested.append(coordinator.evaluate(good_keypoints, 0.9))

        outcome = coordinator.evaluate(good_keypoints, 0.9)

        assert outcome.completed
        assert nested[0].status is AnalysisStatus.BUSY
        assert nested[0].result is None
        assert extractor.calls == 1

    def test_concurrent_callers_have_one_winner(self, good_keypoints, ideal_features):
        from core.analyzer import AnalysisCoordinator, AnalysisStatus

        entered = threading.Event()
        release = threading.Event()

        def hold():
            entered.set()
            release.wait(timeout=5)

        extractor = StubExtractor(ideal_features, on_extract=hold)
        coordinator = AnalysisCoordinator(extractor=extractor)

        outcomes = []
        worker = threading.Thread(target=lambda: outcomes.append(coordinator.evaluate(good_keypoints, 0.9)))
        worker.start()
        assert entered.wait(timeout=5)

        assert coordinator.is_busy
        losers = [coordinator.evaluate(good_keypoints, 0.9) for _ in range(3)]

        release.set()
        worker.join(timeout=5)

        assert all(o.status is AnalysisStatus.BUSY for o in losers)
        assert outcomes[0].completed
        assert extractor.calls == 1

    @pytest.mark.parametrize("confidence,keypoints_kwargs", [
        (0.9, {}),
        (0.1, {}),
        (0.9, {"drop": ["left_ankle"]}),
    ])
    def test_flag_cleared_on_every_exit(self, confidence, keypoints_kwargs):
        """Success, low confidence and missing joints all release the guard"""
        from core.analyzer import AnalysisCoordinator

        coordinator = AnalysisCoordinator()
        coordinator.evaluate(make_keypoints(**keypoints_kwargs), confidence)

        assert not coordinator.is_busy

    def test_flag_cleared_when_extractor_raises(self, good_keypoints):
        from core.analyzer import AnalysisCoordinator

        class Exploding:
            def extract(self, keypoints):
                raise RuntimeError("boom")

        coordinator = AnalysisCoordinator(extractor=Exploding())
        with pytest.raises(RuntimeError):
            coordinator.evaluate(good_keypoints, 0.9)

        assert not coordinator.is_busy


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
