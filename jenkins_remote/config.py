#!/usr/bin/env python
# Software License Agreement (BSD License)
#
# Copyright (c) 2010, Willow Garage, Inc.
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions
# are met:
#
#  * Redistributions of source code must retain the above copyright
#    notice, this list of conditions and the following disclaimer.
#  * Redistributions in binary form must reproduce the above
#    copyright notice, this list of conditions and the following
#    disclaimer in the documentation and/or other materials provided
#    with the distribution.
#  * Neither the name of Willow Garage, Inc. nor the names of its
#    contributors may be used to endorse or promote products derived
#    from this software without specific prior written permission.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS
# 'AS IS' AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT
# LIMITED TO, THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS
# FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE
# COPYRIGHT OWNER OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT,
# INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING,
# BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES;
# LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER
# CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT
# LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN
# ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.

'''
.. module:: jenkins_remote.config
    :platform: Unix, Windows
    :synopsis: XML configuration documents for jobs and views

The documents are only understood as far as their top level goes: simple
settings become attributes, while build steps, triggers, publishers and
every other nested element are kept as serialized XML fragments.  Elements
that are not modelled at all are kept in ``extra`` and written back after
the known ones, so ``from_xml(doc.to_xml())`` reproduces ``doc``.

Example::

    >>> config = JobConfig(description='nightly',
    ...                    builders=['<hudson.tasks.Shell>'
    ...                              '<command>make</command>'
    ...                              '</hudson.tasks.Shell>'])
    >>> server.create_job('nightly', config)
'''

import copy
from typing import ClassVar, List, Optional, Tuple
import xml.etree.ElementTree as ET

from pydantic import BaseModel, field_validator

TEXT = 'text'
BOOL = 'bool'
ELEMENT = 'element'
CHILDREN = 'children'


def fragment(element):
    '''Serialize an element, or re-serialize XML text, in canonical form.

    :param element: ``xml.etree.ElementTree.Element`` or XML, ``str``
    :returns: the element without its tail, ``str``
    '''
    if not isinstance(element, ET.Element):
        element = ET.fromstring(element)
    element = copy.deepcopy(element)
    element.tail = None
    return ET.tostring(element, encoding='unicode')


def _parse_bool(text):
    value = (text or '').strip()
    if value not in ('true', 'false'):
        raise ValueError('expected true or false, got %r' % value)
    return value == 'true'


class ConfigDocument(BaseModel):
    '''Base class of the XML documents posted to and read from Jenkins.

    Subclasses list the top-level elements they model in ``xml_fields`` as
    ``(tag, attribute, kind)`` tuples, in the order Jenkins writes them.
    '''

    xml_fields: ClassVar[Tuple[Tuple[str, str, str], ...]] = ()

    tag: str
    plugin: Optional[str] = None
    extra: List[str] = []

    @field_validator('extra', mode='before')
    @classmethod
    def canonical_fragments(cls, value):
        return [fragment(item) for item in value]

    @classmethod
    def from_element(cls, root):
        values = {'tag': root.tag, 'plugin': root.get('plugin')}
        known = {}
        for tag, attribute, kind in cls.xml_fields:
            known[tag] = (attribute, kind)
        extra = []
        for child in root:
            if child.tag not in known:
                extra.append(child)
                continue
            attribute, kind = known[child.tag]
            if kind == TEXT:
                values[attribute] = child.text or ''
            elif kind == BOOL:
                values[attribute] = _parse_bool(child.text)
            elif kind == ELEMENT:
                values[attribute] = fragment(child)
            elif kind == CHILDREN:
                values[attribute] = [fragment(item) for item in child]
        values['extra'] = extra
        return cls(**values)

    @classmethod
    def from_xml(cls, xml):
        '''Decode a document.

        :param xml: document, ``bytes`` or ``str``
        :throws: ``xml.etree.ElementTree.ParseError`` on malformed XML,
            ``ValueError`` when the content does not fit the document
        '''
        return cls.from_element(ET.fromstring(xml))

    def to_element(self):
        root = ET.Element(self.tag)
        if self.plugin is not None:
            root.set('plugin', self.plugin)
        for tag, attribute, kind in self.xml_fields:
            value = getattr(self, attribute)
            if value is None:
                continue
            if kind == TEXT:
                ET.SubElement(root, tag).text = value
            elif kind == BOOL:
                ET.SubElement(root, tag).text = 'true' if value else 'false'
            elif kind == ELEMENT:
                root.append(ET.fromstring(value))
            elif kind == CHILDREN:
                container = ET.SubElement(root, tag)
                for item in value:
                    container.append(ET.fromstring(item))
        for item in self.extra:
            root.append(ET.fromstring(item))
        return root

    def to_xml(self):
        ''':returns: the document with an XML declaration, ``bytes``'''
        return ET.tostring(self.to_element(), encoding='UTF-8',
                           xml_declaration=True)


class JobConfig(ConfigDocument):
    '''A job's ``config.xml``; freestyle ``project`` unless told otherwise.

    For a maven job use ``tag='maven2-moduleset'``.
    '''

    xml_fields: ClassVar[Tuple[Tuple[str, str, str], ...]] = (
        ('description', 'description', TEXT),
        ('keepDependencies', 'keep_dependencies', BOOL),
        ('properties', 'properties', CHILDREN),
        ('scm', 'scm', ELEMENT),
        ('canRoam', 'can_roam', BOOL),
        ('disabled', 'disabled', BOOL),
        ('blockBuildWhenDownstreamBuilding',
         'block_build_when_downstream_building', BOOL),
        ('blockBuildWhenUpstreamBuilding',
         'block_build_when_upstream_building', BOOL),
        ('triggers', 'triggers', CHILDREN),
        ('concurrentBuild', 'concurrent_build', BOOL),
        ('builders', 'builders', CHILDREN),
        ('publishers', 'publishers', CHILDREN),
        ('buildWrappers', 'build_wrappers', CHILDREN),
    )

    tag: str = 'project'
    description: Optional[str] = None
    keep_dependencies: Optional[bool] = None
    properties: Optional[List[str]] = None
    scm: Optional[str] = None
    can_roam: Optional[bool] = None
    disabled: Optional[bool] = None
    block_build_when_downstream_building: Optional[bool] = None
    block_build_when_upstream_building: Optional[bool] = None
    triggers: Optional[List[str]] = None
    concurrent_build: Optional[bool] = None
    builders: Optional[List[str]] = None
    publishers: Optional[List[str]] = None
    build_wrappers: Optional[List[str]] = None

    @field_validator('scm', mode='before')
    @classmethod
    def canonical_element(cls, value):
        if value is None:
            return value
        return fragment(value)

    @field_validator('properties', 'triggers', 'builders', 'publishers',
                     'build_wrappers', mode='before')
    @classmethod
    def canonical_children(cls, value):
        if value is None:
            return value
        return [fragment(item) for item in value]


class ListView(ConfigDocument):
    '''A list view's ``config.xml``.

    ``job_names`` are the ``<string>`` entries of ``<jobNames>``; the
    comparator Jenkins stores next to them is kept in
    ``job_names_comparator``.
    '''

    xml_fields: ClassVar[Tuple[Tuple[str, str, str], ...]] = (
        ('name', 'name', TEXT),
        ('description', 'description', TEXT),
        ('filterExecutors', 'filter_executors', BOOL),
        ('filterQueue', 'filter_queue', BOOL),
        ('jobFilters', 'job_filters', CHILDREN),
        ('columns', 'columns', CHILDREN),
        ('includeRegex', 'include_regex', TEXT),
        ('recurse', 'recurse', BOOL),
    )

    tag: str = 'hudson.model.ListView'
    name: str
    description: Optional[str] = None
    filter_executors: Optional[bool] = None
    filter_queue: Optional[bool] = None
    job_names: List[str] = []
    job_names_comparator: Optional[str] = None
    job_filters: Optional[List[str]] = None
    columns: Optional[List[str]] = None
    include_regex: Optional[str] = None
    recurse: Optional[bool] = None

    @field_validator('job_filters', 'columns', mode='before')
    @classmethod
    def canonical_children(cls, value):
        if value is None:
            return value
        return [fragment(item) for item in value]

    @classmethod
    def from_element(cls, root):
        job_names = root.find('jobNames')
        if job_names is None:
            return super().from_element(root)
        root = copy.deepcopy(root)
        root.remove(root.find('jobNames'))
        view = super().from_element(root)
        comparator = job_names.find('comparator')
        return view.model_copy(update={
            'job_names': [item.text or '' for item in job_names.iter('string')],
            'job_names_comparator': (None if comparator is None
                                     else comparator.get('class')),
        })

    def to_element(self):
        root = super().to_element()
        if not self.job_names and self.job_names_comparator is None:
            return root
        job_names = ET.Element('jobNames')
        if self.job_names_comparator is not None:
            ET.SubElement(job_names, 'comparator',
                          {'class': self.job_names_comparator})
        for name in self.job_names:
            ET.SubElement(job_names, 'string').text = name
        # Jenkins writes jobNames right after the filter flags
        position = len([child for child in root
                        if child.tag in ('name', 'description',
                                         'filterExecutors', 'filterQueue')])
        root.insert(position, job_names)
        return root
