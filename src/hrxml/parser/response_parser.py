"""Decode HR-XML responses from the parsing service into ParsedResume."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from collections.abc import Iterator

import httpx

from hrxml.errors.classify import classify_response
from hrxml.errors.exceptions import MalformedResponseError
from hrxml.types import ContactInfo, Education, ParsedResume, Position

logger = logging.getLogger(__name__)

_CURRENT_MARKERS = {"current", "present", "now"}
_PHONE_KINDS = ("Telephone", "Mobile")


def handle_parser_data(response: httpx.Response) -> ParsedResume:
    """Validate a service response and decode its HR-XML body.

    Raises the classified HRXMLError for non-2xx statuses and
    MalformedResponseError for bodies that are not a resume document.
    """
    if not response.is_success:
        raise classify_response(response)

    text = response.text
    logger.debug("Decoding %d-byte response", len(response.content))
    if not text.strip():
        raise MalformedResponseError("Parsing service returned an empty body", body=text)
    return parse_hrxml(text)


def parse_hrxml(text: str) -> ParsedResume:
    """Parse an HR-XML document (or a wrapper holding one) into a ParsedResume."""
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise MalformedResponseError(f"Response is not valid XML: {exc}", body=text) from exc

    resume = root if _local(root.tag) == "Resume" else next(_iter(root, "Resume"), None)
    if resume is None:
        raise MalformedResponseError(
            f"No Resume element in response (root is <{_local(root.tag)}>)",
            body=text,
        )

    # Sections normally sit under StructuredXMLResume but some services inline them
    structured = _child(resume, "StructuredXMLResume")
    if structured is None:
        structured = resume

    summary = _text(structured, "ExecutiveSummary") or _text(structured, "Objective")

    return ParsedResume(
        contact=_parse_contact(_child(structured, "ContactInfo")),
        summary=summary,
        positions=_parse_positions(_child(structured, "EmploymentHistory")),
        education=_parse_education(_child(structured, "EducationHistory")),
        skills=_parse_skills(_child(structured, "Qualifications")),
        languages=_parse_languages(_child(structured, "Languages")),
        raw_xml=text,
    )


class ResumeDecoder:
    """Decoder handed to AsyncResponse; turns raw responses into results."""

    def decode(self, response: httpx.Response) -> ParsedResume:
        return handle_parser_data(response)


# ── Section parsers ──


def _parse_contact(contact: ET.Element | None) -> ContactInfo:
    if contact is None:
        return ContactInfo()

    given = _text(contact, "PersonName", "GivenName")
    family = _text(contact, "PersonName", "FamilyName")
    formatted = _text(contact, "PersonName", "FormattedName")
    if formatted is None and (given or family):
        formatted = " ".join(part for part in (given, family) if part)

    info = ContactInfo(formatted_name=formatted, given_name=given, family_name=family)

    for method in _children(contact, "ContactMethod"):
        email = _text(method, "InternetEmailAddress")
        if email:
            info.emails.append(email)
        for kind in _PHONE_KINDS:
            number = _text(method, kind, "FormattedNumber")
            if number:
                info.phones.append(number)

        address = _child(method, "PostalAddress")
        if address is not None and info.city is None:
            delivery = _child(address, "DeliveryAddress")
            if delivery is not None:
                info.address_lines = [
                    line for line in (_clean(e.text) for e in _children(delivery, "AddressLine"))
                    if line
                ]
            info.city = _text(address, "Municipality")
            info.region = _text(address, "Region")
            info.postal_code = _text(address, "PostalCode")
            info.country = _text(address, "CountryCode")

    return info


def _parse_positions(history: ET.Element | None) -> list[Position]:
    if history is None:
        return []

    positions: list[Position] = []
    for employer_org in _children(history, "EmployerOrg"):
        employer = _text(employer_org, "EmployerOrgName")
        for entry in _children(employer_org, "PositionHistory"):
            end_date = _date(_child(entry, "EndDate"))
            is_current = (
                entry.get("currentEmployer", "").lower() == "true"
                or end_date is None
                or end_date.lower() in _CURRENT_MARKERS
            )
            positions.append(Position(
                employer=employer or _text(entry, "OrgName", "OrganizationName"),
                title=_text(entry, "Title"),
                start_date=_date(_child(entry, "StartDate")),
                end_date=end_date,
                description=_text(entry, "Description"),
                is_current=is_current,
            ))
    return positions


def _parse_education(history: ET.Element | None) -> list[Education]:
    if history is None:
        return []

    entries: list[Education] = []
    for school_org in _children(history, "SchoolOrInstitution"):
        school = _text(school_org, "School", "SchoolName") or _text(school_org, "SchoolName")
        degrees = _children(school_org, "Degree")
        if not degrees:
            entries.append(Education(school=school))
            continue
        for degree in degrees:
            entries.append(Education(
                school=school,
                degree=_text(degree, "DegreeName"),
                major=_text(degree, "DegreeMajor", "Name"),
                graduation_date=_date(_child(degree, "DegreeDate")),
            ))
    return entries


def _parse_skills(qualifications: ET.Element | None) -> list[str]:
    if qualifications is None:
        return []

    skills: list[str] = []
    seen: set[str] = set()
    for competency in _iter(qualifications, "Competency"):
        name = _clean(competency.get("name"))
        if name and name.lower() not in seen:
            seen.add(name.lower())
            skills.append(name)
    return skills


def _parse_languages(languages: ET.Element | None) -> list[str]:
    if languages is None:
        return []
    return [
        code for code in (_text(lang, "LanguageCode") for lang in _children(languages, "Language"))
        if code
    ]


# ── Namespace-agnostic element helpers ──


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _children(elem: ET.Element, name: str) -> list[ET.Element]:
    return [child for child in elem if _local(child.tag) == name]


def _child(elem: ET.Element, name: str) -> ET.Element | None:
    for child in elem:
        if _local(child.tag) == name:
            return child
    return None


def _iter(elem: ET.Element, name: str) -> Iterator[ET.Element]:
    return (e for e in elem.iter() if _local(e.tag) == name)


def _text(elem: ET.Element, *path: str) -> str | None:
    """Stripped text at a child path, or None when missing or blank."""
    current: ET.Element | None = elem
    for name in path:
        if current is None:
            return None
        current = _child(current, name)
    if current is None:
        return None
    return _clean(current.text)


def _date(elem: ET.Element | None) -> str | None:
    # HR-XML wraps dates: <StartDate><YearMonth>2019-03</YearMonth></StartDate>
    if elem is None:
        return None
    for child in elem:
        value = _clean(child.text)
        if value:
            return value
    return _clean(elem.text)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = " ".join(value.split())
    return value or None
