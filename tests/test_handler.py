"""End-to-end tests for the serverless handler."""

import json
from unittest.mock import MagicMock, patch

import pytest
from google.cloud import vision

from boxskills import handler as handler_module
from boxskills.box import BoxClient
from boxskills.box.exceptions import WebhookEventError
from boxskills.processing import MetadataWriteError, SkillProcessor
from boxskills.vision import GoogleVisionAnnotator
from boxskills.vision.exceptions import AnnotationError
from tests.conftest import FakeAnnotator, FakeBoxAPIError, FakeBoxSDK

EVENT = {"body": json.dumps({"source": {"owned_by": {"id": "111"}, "id": "222"}})}


@pytest.fixture
def sdk():
    return FakeBoxSDK(files={"222": b"\xff\xd8 jpeg bytes"})


@pytest.fixture
def wire(monkeypatch, config, sdk):
    """Install a processor and Box client factory built on fakes."""
    def install(annotator):
        processor = SkillProcessor(config, annotator=annotator)
        monkeypatch.setattr(handler_module, "_processor", processor)
        for_user = MagicMock(side_effect=lambda cfg, user_id: BoxClient(sdk, user_id=user_id))
        monkeypatch.setattr(handler_module.BoxClient, "for_user", for_user)
        return for_user
    return install


class TestHandler:

    def test_end_to_end_with_vision_response(self, wire, sdk):
        vision_client = MagicMock()
        vision_client.annotate_image.return_value = vision.AnnotateImageResponse(
            label_annotations=[
                vision.EntityAnnotation(description="tree", score=0.98),
                vision.EntityAnnotation(description="park", score=0.87),
            ],
            full_text_annotation=vision.TextAnnotation(text="Sign: No Dogs"),
        )
        for_user = wire(GoogleVisionAnnotator(client=vision_client))

        response = handler_module.handler(EVENT, None)

        for_user.assert_called_once()
        assert for_user.call_args.args[1] == "111"
        assert vision_client.annotate_image.call_args.args[0]["image"]["content"] == b"\xff\xd8 jpeg bytes"
        assert sdk.file_metadata.instances == {
            ("222", "box-skills-keywords-demo"): {"keywords": "tree, park"},
            ("222", "box-skills-transcripts-demo"): {"transcripts": "Sign: No Dogs"},
        }
        assert response["statusCode"] == 200
        assert json.loads(response["body"]) == {
            "box-skills-keywords-demo": {"keywords": "tree, park"},
            "box-skills-transcripts-demo": {"transcripts": "Sign: No Dogs"},
        }

    def test_missing_file_id_fails_before_any_network_call(self, wire, sdk):
        annotator = FakeAnnotator()
        for_user = wire(annotator)
        event = {"body": json.dumps({"source": {"owned_by": {"id": "111"}}})}

        with pytest.raises(WebhookEventError):
            handler_module.handler(event, None)

        for_user.assert_not_called()
        assert sdk.downloads.calls == []
        assert annotator.requests == []

    def test_invalid_json_body(self, wire):
        for_user = wire(FakeAnnotator())

        with pytest.raises(WebhookEventError):
            handler_module.handler({"body": "not json"}, None)

        for_user.assert_not_called()

    def test_annotation_failure_is_surfaced(self, wire, sdk):
        wire(FakeAnnotator(error=AnnotationError("service unavailable")))

        with pytest.raises(AnnotationError):
            handler_module.handler(EVENT, None)

        assert sdk.file_metadata.create_calls == []

    def test_partial_write_failure_is_surfaced(self, wire, sdk):
        sdk.file_metadata.failing_templates["box-skills-keywords-demo"] = FakeBoxAPIError(500)
        wire(FakeAnnotator())

        with pytest.raises(MetadataWriteError):
            handler_module.handler(EVENT, None)

        assert ("222", "box-skills-transcripts-demo") in sdk.file_metadata.instances


class TestGetProcessor:

    def test_processor_is_created_once(self, monkeypatch, config):
        monkeypatch.setattr(handler_module, "_processor", None)

        with patch.object(handler_module.ConfigManager, "load", return_value=config) as mock_load, \
                patch.object(handler_module, "setup_logging") as mock_logging, \
                patch("boxskills.processing.processor.VisionServiceFactory.create_from_config",
                      return_value=FakeAnnotator()):
            first = handler_module.get_processor()
            second = handler_module.get_processor()

        assert first is second
        mock_load.assert_called_once_with()
        mock_logging.assert_called_once_with("INFO", config.get("logging.format"), log_file=None)

    def test_log_file_setting_is_applied(self, monkeypatch, config, tmp_path):
        monkeypatch.setattr(handler_module, "_processor", None)
        log_path = str(tmp_path / "skills.log")
        config.set("logging.file", log_path)

        with patch.object(handler_module.ConfigManager, "load", return_value=config), \
                patch.object(handler_module, "setup_logging") as mock_logging, \
                patch("boxskills.processing.processor.VisionServiceFactory.create_from_config",
                      return_value=FakeAnnotator()):
            handler_module.get_processor()

        assert mock_logging.call_args.kwargs["log_file"] == log_path


class TestBuildResponse:

    def test_body_is_json(self, config, box_client):
        result = SkillProcessor(config, annotator=FakeAnnotator()).process_file(box_client, "222")

        response = handler_module.build_response(result)

        assert response["statusCode"] == 200
        assert isinstance(response["body"], str)
