"""Tests for featurelayer.features.params: wire names and omission of unset fields."""

from datetime import datetime, timezone

import pytest

from featurelayer.features.params import (
    DeleteParams,
    EditParams,
    QueryParams,
    StatisticDefinition,
    as_params,
    wire_name,
)


class TestWireName:

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("where", "where"),
            ("out_fields", "outFields"),
            ("in_sr", "inSR"),
            ("out_sr", "outSR"),
            ("return_z", "returnZ"),
            ("return_m", "returnM"),
            ("group_by_fields_for_statistics", "groupByFieldsForStatistics"),
            ("return_exceeded_limit_features", "returnExceededLimitFeatures"),
        ],
    )
    def test_names(self, name, expected):
        assert wire_name(name) == expected


class TestQueryParams:

    @pytest.mark.unit
    def test_empty_params(self):
        assert QueryParams().to_params() == {}

    @pytest.mark.unit
    def test_unset_fields_omitted(self):
        params = QueryParams(where="1=1", return_geometry=False, out_sr=4326)
        assert params.to_params() == {"where": "1=1", "returnGeometry": False, "outSR": 4326}

    @pytest.mark.unit
    def test_extra_merged_last(self):
        params = QueryParams(where="A = 1", extra={"where": "B = 2", "f": "pjson"})
        assert params.to_params() == {"where": "B = 2", "f": "pjson"}

    @pytest.mark.unit
    def test_opaque_fields_passed_through(self):
        quantization = {"mode": "view", "tolerance": 1.5}
        moment = datetime(2020, 1, 1, tzinfo=timezone.utc)
        params = QueryParams(quantization_parameters=quantization, historic_moment=moment)
        sent = params.to_params()
        assert sent["quantizationParameters"] is quantization
        assert sent["historicMoment"] is moment

    @pytest.mark.unit
    def test_statistics(self):
        stat = StatisticDefinition("count", "OBJECTID", "total")
        params = QueryParams(out_statistics=[stat], group_by_fields_for_statistics="STATUS")
        sent = params.to_params()
        assert sent["outStatistics"] == [stat]
        assert stat.to_dict() == {
            "statisticType": "count",
            "onStatisticField": "OBJECTID",
            "outStatisticFieldName": "total",
        }

    @pytest.mark.unit
    def test_statistic_without_output_name(self):
        assert StatisticDefinition("max", "HEIGHT").to_dict() == {
            "statisticType": "max",
            "onStatisticField": "HEIGHT",
        }


class TestEditParams:

    @pytest.mark.unit
    def test_edit_params(self):
        params = EditParams(return_edit_moment=True, rollback_on_failure=False)
        assert params.to_params() == {"returnEditMoment": True, "rollbackOnFailure": False}

    @pytest.mark.unit
    def test_delete_params_accept_filters(self):
        params = DeleteParams(where="STATUS = 'closed'", spatial_rel="esriSpatialRelWithin")
        assert params.to_params() == {
            "where": "STATUS = 'closed'",
            "spatialRel": "esriSpatialRelWithin",
        }


class TestAsParams:

    @pytest.mark.unit
    def test_none(self):
        assert as_params(None) == {}

    @pytest.mark.unit
    def test_mapping_is_copied(self):
        original = {"where": "1=1"}
        copied = as_params(original)
        copied["outFields"] = "*"
        assert original == {"where": "1=1"}

    @pytest.mark.unit
    def test_record(self):
        assert as_params(EditParams(gdb_version="v1")) == {"gdbVersion": "v1"}
