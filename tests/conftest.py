"""Shared fixtures for al-xml-doc tests."""

import tempfile
from pathlib import Path

import pytest

from al_xml_doc.utils.logger_setup import LoggerManager

# Keep test logs out of the working directory
LoggerManager.setup_logging(log_file=str(Path(tempfile.gettempdir()) / 'al_xml_doc_tests.log'), level='DEBUG')

from al_xml_doc.src.analyzer import DocumentationAnalyzer  # noqa: E402
from al_xml_doc.src.config import Config, CheckConfig, DocumentationCheckConfiguration  # noqa: E402
from al_xml_doc.src.extractor import SourceExtractor  # noqa: E402
from al_xml_doc.src.publisher import DiagnosticCollection, DiagnosticPublisher  # noqa: E402


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Make sure environment overrides never leak into the configuration."""
    monkeypatch.delenv('AL_XML_DOC_CHECK_ENABLED', raising=False)
    monkeypatch.delenv('AL_XML_DOC_SEVERITY', raising=False)


@pytest.fixture
def config(tmp_path):
    return Config(check=CheckConfig(severity="Warning"), project_root=str(tmp_path))


@pytest.fixture
def extractor():
    return SourceExtractor()


@pytest.fixture
def collection():
    return DiagnosticCollection()


@pytest.fixture
def analyzer(config, extractor, collection):
    return DocumentationAnalyzer(
        DocumentationCheckConfiguration(config),
        extractor,
        DiagnosticPublisher(collection)
    )
