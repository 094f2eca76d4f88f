# %%
import logging

import pandas as pd

from flight_delay import eda
from flight_delay.config import FEATURE_COLUMNS, PipelineConfig
from flight_delay.features import align, encode, split_xy
from flight_delay.ingest import read_table
from flight_delay.jobs import LocalFeatureJob
from flight_delay.metrics import compute_metrics, format_report
from flight_delay.models import make_trainer, to_labels

logging.basicConfig(level=logging.INFO)

# %%
# Where the data lives. Every path is a directory of part files.
config = PipelineConfig(
    raw_path='data/airline/delay/{year}',
    weather_path='data/airline/weather/{year}',
    features_path='data/airline/fm/ord_{year}',
)

# %% [markdown]
# # 1. Knowing the data

# %%
# We load the raw 2007 on-time data. The files have a header row.
df_07 = read_table(config.raw_for(2007))
df_07.head()

# %%
print('2007 dataset shape ' + str(df_07.shape))

# %%
# Only non cancelled departures from Chicago O'Hare
ord_07 = eda.departures(df_07, config.origin)
print(f"Departures from {config.origin}: {len(ord_07)}")
ord_07['DepDelay'].describe()

# %% [markdown]
# ## Average delay per month and per hour of the day

# %%
eda.mean_delay_by_month(df_07, config.origin)

# %%
eda.mean_delay_by_hour(df_07, config.origin)

# %% [markdown]
# Delays grow through the day: early morning departures are mostly on time, while the evening
# flights pick up the delays accumulated by the aircraft earlier on.

# %%
print(f"Delayed 15 minutes or more: {eda.delay_rate(df_07, config.origin) * 100:.2f}%")

# %% [markdown]
# # 2. Building the feature matrix
# For each year we join the flights with the daily weather at the origin airport (minimum and
# maximum temperature, precipitation, snow and wind) and add the number of days to the closest
# holiday. On the cluster this is the Pig job (`PigFeatureJob`); for a local copy of the data
# the same join runs with pandas.

# %%
job = LocalFeatureJob(config)
train_path = job.run(2007, config.origin)
test_path = job.run(2008, config.origin)

# %%
# The feature matrix has no header, so we give the column names
fm_07 = read_table(train_path, names=FEATURE_COLUMNS)
fm_08 = read_table(test_path, names=FEATURE_COLUMNS)
fm_07.head()

# %% [markdown]
# # 3. Encoding
# The target is a delay of 15 minutes or more. Carrier and destination keep their 25 most
# frequent values, the rest are merged into one category, then both are one-hot encoded.
# Temperatures are converted from tenths of degrees Celsius to Fahrenheit.

# %%
train = encode(fm_07, top_k=config.top_k)
test = encode(fm_08, top_k=config.top_k)
print(f'Shape train: {train.shape}')
print(f'Shape test: {test.shape}')

# %%
# Both years must have the same columns. Destinations that only appear in one year are dropped.
train, test = align(train, test)
x_train, y_train = split_xy(train)
x_test, y_test = split_xy(test)

print(f'Shape X train: {x_train.shape}')
print(f'Shape X test: {x_test.shape}')

# %%
print(f"Delayed flights in 2008: {round(y_test.mean() * 100, 2)}%")

# %% [markdown]
# # 4. Modeling and predicting the data
# We train on 2007 and evaluate on 2008.

# %% [markdown]
# ### A. Random Forest

# %%
randomforest = make_trainer('random_forest', config.params['random_forest'])
rf_model = randomforest.fit(x_train, y_train)
y_pred_randomforest = to_labels(randomforest.predict(rf_model, x_test))

# %% [markdown]
# ### B. Gradient Boosting

# %%
gradientboost = make_trainer('gradient_boosting', config.params['gradient_boosting'])
gbm_model = gradientboost.fit(x_train, y_train)
y_pred_gradientboost = to_labels(gradientboost.predict(gbm_model, x_test))

# %% [markdown]
# # 5. Evaluation

# %%
results = {
    'Random Forest': compute_metrics(y_pred_randomforest, y_test.to_numpy()),
    'Gradient Boosting': compute_metrics(y_pred_gradientboost, y_test.to_numpy()),
}
print(format_report(results))

# %%
pd.DataFrame(results, index=['precision', 'recall', 'F1', 'accuracy']).transpose()

# %% [markdown]
# ## Feature importance of the random forest

# %%
pd.Series(rf_model.feature_importances_, index=x_train.columns).sort_values(ascending=False).head(15)
