"""
Catalog of the Hivemall functions exposed to Spark.

Every entry binds a short function name to the fully-qualified class that
implements it inside the Hivemall jar, together with the kind of Hive function
it is and the names of the columns a table function produces.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .exceptions import UnknownFunctionError


class FunctionType(str, Enum):
    """Kinds of Hive functions understood by the Spark Hive bridge."""
    UDF = "udf"
    GENERIC_UDF = "generic_udf"
    UDTF = "udtf"
    UDAF = "udaf"


@dataclass(frozen=True)
class FunctionBinding:
    """Immutable binding between a short name and an external implementation."""
    name: str
    class_name: str
    function_type: FunctionType
    group: str
    output_columns: Tuple[str, ...] = ()
    mixable: bool = False
    sql_name: Optional[str] = None

    def __post_init__(self):
        if self.sql_name is None:
            object.__setattr__(self, 'sql_name', self.name)

    @property
    def is_table_function(self) -> bool:
        return self.function_type == FunctionType.UDTF

    @property
    def is_aggregate(self) -> bool:
        return self.function_type == FunctionType.UDAF


FEATURE_WEIGHT = ("feature", "weight")
FEATURE_WEIGHT_CONV = ("feature", "weight", "conv")
LABEL_FEATURE_WEIGHT = ("label", "feature", "weight")
LABEL_FEATURE_WEIGHT_CONV = ("label", "feature", "weight", "conv")


def _trainer(name: str, class_name: str, group: str, output_columns: Tuple[str, ...]) -> FunctionBinding:
    return FunctionBinding(name, class_name, FunctionType.UDTF, group,
                           output_columns=output_columns, mixable=True)


def _udtf(name: str, class_name: str, group: str, output_columns: Tuple[str, ...] = ()) -> FunctionBinding:
    return FunctionBinding(name, class_name, FunctionType.UDTF, group, output_columns=output_columns)


def _udf(name: str, class_name: str, group: str, sql_name: Optional[str] = None) -> FunctionBinding:
    return FunctionBinding(name, class_name, FunctionType.UDF, group, sql_name=sql_name)


def _generic_udf(name: str, class_name: str, group: str) -> FunctionBinding:
    return FunctionBinding(name, class_name, FunctionType.GENERIC_UDF, group)


def _udaf(name: str, class_name: str, group: str) -> FunctionBinding:
    return FunctionBinding(name, class_name, FunctionType.UDAF, group)


_BINDINGS: List[FunctionBinding] = [
    # misc
    _udf("hivemall_version", "hivemall.HivemallVersionUDF", "misc"),

    # regression
    _trainer("train_adadelta", "hivemall.regression.AdaDeltaUDTF", "regression", FEATURE_WEIGHT),
    _trainer("train_adagrad", "hivemall.regression.AdaGradUDTF", "regression", FEATURE_WEIGHT),
    _trainer("train_arow_regr", "hivemall.regression.AROWRegressionUDTF", "regression", FEATURE_WEIGHT_CONV),
    _trainer("train_arowe_regr", "hivemall.regression.AROWRegressionUDTF$AROWe", "regression",
             FEATURE_WEIGHT_CONV),
    _trainer("train_arowe2_regr", "hivemall.regression.AROWRegressionUDTF$AROWe2", "regression",
             FEATURE_WEIGHT_CONV),
    _trainer("train_logregr", "hivemall.regression.LogressUDTF", "regression", FEATURE_WEIGHT),
    _trainer("train_pa1_regr", "hivemall.regression.PassiveAggressiveRegressionUDTF", "regression",
             FEATURE_WEIGHT),
    _trainer("train_pa1a_regr", "hivemall.regression.PassiveAggressiveRegressionUDTF$PA1a", "regression",
             FEATURE_WEIGHT),
    _trainer("train_pa2_regr", "hivemall.regression.PassiveAggressiveRegressionUDTF$PA2", "regression",
             FEATURE_WEIGHT),
    _trainer("train_pa2a_regr", "hivemall.regression.PassiveAggressiveRegressionUDTF$PA2a", "regression",
             FEATURE_WEIGHT),

    # binary classification
    _trainer("train_perceptron", "hivemall.classifier.PerceptronUDTF", "classifier", FEATURE_WEIGHT),
    _trainer("train_pa", "hivemall.classifier.PassiveAggressiveUDTF", "classifier", FEATURE_WEIGHT),
    _trainer("train_pa1", "hivemall.classifier.PassiveAggressiveUDTF$PA1", "classifier", FEATURE_WEIGHT),
    _trainer("train_pa2", "hivemall.classifier.PassiveAggressiveUDTF$PA2", "classifier", FEATURE_WEIGHT),
    _trainer("train_cw", "hivemall.classifier.ConfidenceWeightedUDTF", "classifier", FEATURE_WEIGHT_CONV),
    _trainer("train_arow", "hivemall.classifier.AROWClassifierUDTF", "classifier", FEATURE_WEIGHT_CONV),
    _trainer("train_arowh", "hivemall.classifier.AROWClassifierUDTF$AROWh", "classifier",
             FEATURE_WEIGHT_CONV),
    _trainer("train_scw", "hivemall.classifier.SoftConfideceWeightedUDTF$SCW1", "classifier",
             FEATURE_WEIGHT_CONV),
    _trainer("train_scw2", "hivemall.classifier.SoftConfideceWeightedUDTF$SCW2", "classifier",
             FEATURE_WEIGHT_CONV),
    _trainer("train_adagrad_rda", "hivemall.classifier.AdaGradRDAUDTF", "classifier", FEATURE_WEIGHT),

    # multiclass classification
    _trainer("train_multiclass_perceptron", "hivemall.classifier.multiclass.MulticlassPerceptronUDTF",
             "classifier.multiclass", LABEL_FEATURE_WEIGHT),
    _trainer("train_multiclass_pa", "hivemall.classifier.multiclass.MulticlassPassiveAggressiveUDTF",
             "classifier.multiclass", LABEL_FEATURE_WEIGHT),
    _trainer("train_multiclass_pa1", "hivemall.classifier.multiclass.MulticlassPassiveAggressiveUDTF$PA1",
             "classifier.multiclass", LABEL_FEATURE_WEIGHT),
    _trainer("train_multiclass_pa2", "hivemall.classifier.multiclass.MulticlassPassiveAggressiveUDTF$PA2",
             "classifier.multiclass", LABEL_FEATURE_WEIGHT),
    _trainer("train_multiclass_cw", "hivemall.classifier.multiclass.MulticlassConfidenceWeightedUDTF",
             "classifier.multiclass", LABEL_FEATURE_WEIGHT_CONV),
    _trainer("train_multiclass_arow", "hivemall.classifier.multiclass.MulticlassAROWClassifierUDTF",
             "classifier.multiclass", LABEL_FEATURE_WEIGHT_CONV),
    _trainer("train_multiclass_scw",
             "hivemall.classifier.multiclass.MulticlassSoftConfidenceWeightedUDTF$SCW1",
             "classifier.multiclass", LABEL_FEATURE_WEIGHT_CONV),
    _trainer("train_multiclass_scw2",
             "hivemall.classifier.multiclass.MulticlassSoftConfidenceWeightedUDTF$SCW2",
             "classifier.multiclass", LABEL_FEATURE_WEIGHT_CONV),

    # ensemble
    _udaf("voted_avg", "hivemall.ensemble.bagging.VotedAvgUDAF", "ensemble"),
    _udaf("weight_voted_avg", "hivemall.ensemble.bagging.WeightVotedAvgUDAF", "ensemble"),
    _udaf("argmin_kld", "hivemall.ensemble.ArgminKLDistanceUDAF", "ensemble"),
    _udaf("max_label", "hivemall.ensemble.MaxValueLabelUDAF", "ensemble"),
    _udaf("maxrow", "hivemall.ensemble.MaxRowUDAF", "ensemble"),

    # evaluation
    _udaf("f1score", "hivemall.evaluation.FMeasureUDAF", "evaluation"),
    _udaf("mae", "hivemall.evaluation.MeanAbsoluteErrorUDAF", "evaluation"),
    _udaf("mse", "hivemall.evaluation.MeanSquaredErrorUDAF", "evaluation"),
    _udaf("rmse", "hivemall.evaluation.RootMeanSquaredErrorUDAF", "evaluation"),

    # knn
    _udf("cosine_sim", "hivemall.knn.distance.CosineSimilarityUDF", "knn.distance"),
    _udf("hamming_distance", "hivemall.knn.distance.HammingDistanceUDF", "knn.distance"),
    _udf("jaccard", "hivemall.knn.distance.JaccardIndexUDF", "knn.distance"),
    _udf("popcnt", "hivemall.knn.distance.PopcountUDF", "knn.distance"),
    _udf("kld", "hivemall.knn.distance.KLDivergenceUDF", "knn.distance"),
    _udtf("minhash", "hivemall.knn.lsh.MinHashUDTF", "knn.lsh", ("clusterid", "item")),
    _udf("bbit_minhash", "hivemall.knn.lsh.bBitMinHashUDF", "knn.lsh"),
    _generic_udf("minhashes", "hivemall.knn.lsh.MinHashesUDFWrapper", "knn.lsh"),

    # feature vectors
    _generic_udf("add_bias", "hivemall.ftvec.AddBiasUDFWrapper", "ftvec"),
    _generic_udf("extract_feature", "hivemall.ftvec.ExtractFeatureUDFWrapper", "ftvec"),
    _generic_udf("extract_weight", "hivemall.ftvec.ExtractWeightUDFWrapper", "ftvec"),
    _generic_udf("add_feature_index", "hivemall.ftvec.AddFeatureIndexUDFWrapper", "ftvec"),
    _generic_udf("sort_by_feature", "hivemall.ftvec.SortByFeatureUDFWrapper", "ftvec"),
    _udtf("amplify", "hivemall.ftvec.amplify.AmplifierUDTF", "ftvec.amplify"),
    _udtf("rand_amplify", "hivemall.ftvec.amplify.RandomAmplifierUDTF", "ftvec.amplify"),
    _udf("mhash", "hivemall.ftvec.hashing.MurmurHash3UDF", "ftvec.hashing"),
    _udf("sha1", "hivemall.ftvec.hashing.Sha1UDF", "ftvec.hashing", sql_name="hivemall_sha1"),
    _udf("rescale", "hivemall.ftvec.scaling.RescaleUDF", "ftvec.scaling"),
    _udf("zscore", "hivemall.ftvec.scaling.ZScoreUDF", "ftvec.scaling"),
    _generic_udf("normalize", "hivemall.ftvec.scaling.L2NormalizationUDFWrapper", "ftvec.scaling"),

    # tools
    _generic_udf("rowid", "hivemall.tools.mapred.RowIdUDFWrapper", "tools.mapred"),
    _udf("sigmoid", "hivemall.tools.math.SigmodUDF", "tools.math"),

    # dataset
    _udtf("lr_datagen", "hivemall.dataset.LogisticRegressionDataGeneratorUDTFWrapper", "dataset",
          ("label", "features")),
]

REGISTRY: Dict[str, FunctionBinding] = {binding.name: binding for binding in _BINDINGS}


def get_binding(name: str) -> FunctionBinding:
    """
    Look up the binding registered under a short function name.

    Raises:
        UnknownFunctionError: If no function with that name is registered
    """
    try:
        return REGISTRY[name]
    except KeyError:
        raise UnknownFunctionError(name) from None


def list_bindings(group: Optional[str] = None,
                  function_type: Optional[FunctionType] = None) -> List[FunctionBinding]:
    """Return the bindings ordered by name, optionally filtered by group and type."""
    bindings = REGISTRY.values()
    if group is not None:
        bindings = [b for b in bindings if b.group == group]
    if function_type is not None:
        function_type = FunctionType(function_type)
        bindings = [b for b in bindings if b.function_type == function_type]
    return sorted(bindings, key=lambda b: b.name)


def groups() -> List[str]:
    return sorted({binding.group for binding in REGISTRY.values()})
