from collections import deque

import httpx
import pytest

from hrxml.config import get_defaults, hierarchy

SAMPLE_HRXML = """<?xml version="1.0" encoding="UTF-8"?>
<Resume xmlns="http://ns.hr-xml.org/2006-02-28">
  <StructuredXMLResume>
    <ContactInfo>
      <PersonName>
        <FormattedName>Jane Doe</FormattedName>
        <GivenName>Jane</GivenName>
        <FamilyName>Doe</FamilyName>
      </PersonName>
      <ContactMethod>
        <InternetEmailAddress>jane@example.com</InternetEmailAddress>
      </ContactMethod>
      <ContactMethod>
        <Mobile><FormattedNumber>+1 555 0100</FormattedNumber></Mobile>
        <PostalAddress>
          <CountryCode>US</CountryCode>
          <PostalCode>97201</PostalCode>
          <Region>OR</Region>
          <Municipality>Portland</Municipality>
          <DeliveryAddress>
            <AddressLine>123 Main St</AddressLine>
            <AddressLine>Apt 4</AddressLine>
          </DeliveryAddress>
        </PostalAddress>
      </ContactMethod>
    </ContactInfo>
    <ExecutiveSummary>Backend engineer with a taste for parsers.</ExecutiveSummary>
    <EmploymentHistory>
      <EmployerOrg>
        <EmployerOrgName>Acme Corp</EmployerOrgName>
        <PositionHistory currentEmployer="true">
          <Title>Senior Engineer</Title>
          <StartDate><YearMonth>2020-01</YearMonth></StartDate>
          <EndDate><StringDate>current</StringDate></EndDate>
          <Description>Built the document pipeline.</Description>
        </PositionHistory>
        <PositionHistory>
          <Title>Engineer</Title>
          <StartDate><YearMonth>2017-06</YearMonth></StartDate>
          <EndDate><YearMonth>2019-12</YearMonth></EndDate>
        </PositionHistory>
      </EmployerOrg>
    </EmploymentHistory>
    <EducationHistory>
      <SchoolOrInstitution>
        <School><SchoolName>State University</SchoolName></School>
        <Degree>
          <DegreeName>BSc</DegreeName>
          <DegreeDate><Year>2017</Year></DegreeDate>
          <DegreeMajor><Name>Computer Science</Name></DegreeMajor>
        </Degree>
      </SchoolOrInstitution>
    </EducationHistory>
    <Qualifications>
      <Competency name="Python"/>
      <Competency name="XML">
        <Competency name="XPath"/>
      </Competency>
      <Competency name="python"/>
    </Qualifications>
    <Languages>
      <Language><LanguageCode>en</LanguageCode></Language>
      <Language><LanguageCode>fr</LanguageCode></Language>
    </Languages>
  </StructuredXMLResume>
</Resume>
"""


def hrxml_for(name: str) -> str:
    """Minimal HR-XML document for a candidate called ``name``."""
    return (
        "<Resume><StructuredXMLResume><ContactInfo><PersonName>"
        f"<FormattedName>{name}</FormattedName>"
        "</PersonName></ContactInfo></StructuredXMLResume></Resume>"
    )


class FakeUserAgent:
    """In-memory transport: responses complete only when told to."""

    def __init__(self):
        self.pending = {}
        self.ready = deque()
        self.pokes = 0
        self._next_id = 1

    def submit(self, response):
        request_id = self._next_id
        self._next_id += 1
        self.pending[request_id] = response
        return request_id

    def complete(self, request_id):
        self.ready.append((self.pending.pop(request_id), request_id))

    def poke(self):
        self.pokes += 1

    def to_return_count(self):
        self.poke()
        return len(self.ready)

    def total_count(self):
        self.poke()
        return len(self.pending) + len(self.ready)

    def wait_for_next_response(self):
        self.poke()
        if not self.ready and self.pending:
            self.complete(next(iter(self.pending)))
        if not self.ready:
            return None
        return self.ready.popleft()


class UpperDecoder:
    def decode(self, response):
        return response.upper()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user/project config files and HRXML_* env vars out of tests."""
    monkeypatch.setattr(hierarchy, "_GLOBAL_CONFIG_PATH", tmp_path / "global" / "config.yaml")
    for key in get_defaults():
        monkeypatch.delenv(hierarchy.ENV_PREFIX + key.upper(), raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def sample_hrxml():
    return SAMPLE_HRXML


@pytest.fixture
def fake_ua():
    return FakeUserAgent()


@pytest.fixture
def upper_decoder():
    return UpperDecoder()


@pytest.fixture
def resume_service():
    """MockTransport that answers each upload with HR-XML naming its filename."""

    def handler(request: httpx.Request) -> httpx.Response:
        body = request.content
        start = body.index(b'filename="') + len(b'filename="')
        filename = body[start:body.index(b'"', start)].decode()
        return httpx.Response(200, text=hrxml_for(filename))

    return httpx.MockTransport(handler)


@pytest.fixture
def sample_pdf(tmp_path):
    path = tmp_path / "alice.pdf"
    path.write_bytes(b"%PDF-1.4 fake resume")
    return path


@pytest.fixture
def make_hrxml():
    return hrxml_for
